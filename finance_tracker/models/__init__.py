"""
Data Models Package

This package contains all Pydantic models used by the finance tracker.
Every record held in a store slice conforms to one of these schemas.
"""

from finance_tracker.models.account import (
    SUBTYPE_FAMILIES,
    Account,
    AccountSubType,
    AccountType,
    Currency,
    Institution,
)
from finance_tracker.models.base import LOADING_CONTEXT, RecordModel, generate_id
from finance_tracker.models.category import (
    Category,
    CategoryPattern,
    PatternMatchType,
)
from finance_tracker.models.report import (
    AccountSummary,
    CategoryAggregate,
    MonthlyAggregate,
)
from finance_tracker.models.transaction import (
    AnyTransaction,
    Frequency,
    ProjectedTransaction,
    Transaction,
    TransactionFilter,
    TransactionType,
)

__all__ = [
    # Base
    "LOADING_CONTEXT",
    "RecordModel",
    "generate_id",
    # Account models
    "SUBTYPE_FAMILIES",
    "Account",
    "AccountSubType",
    "AccountType",
    "Currency",
    "Institution",
    # Category models
    "Category",
    "CategoryPattern",
    "PatternMatchType",
    # Transaction models
    "AnyTransaction",
    "Frequency",
    "ProjectedTransaction",
    "Transaction",
    "TransactionFilter",
    "TransactionType",
    # Report models
    "AccountSummary",
    "CategoryAggregate",
    "MonthlyAggregate",
]
