"""
Domain Stores Package

One store per slice of state. Each store is constructed once, hydrated
from the shared document store, and handed to its consumers.
"""

from finance_tracker.stores.accounts import AccountsState, AccountsStore
from finance_tracker.stores.base import (
    CURRENT_SCHEMA_VERSION,
    PersistedStore,
    SnapshotEnvelope,
    migrate_state,
)
from finance_tracker.stores.categories import (
    CategoriesState,
    CategoriesStore,
    CategoryHierarchyError,
)
from finance_tracker.stores.transactions import (
    TransactionsState,
    TransactionsStore,
    validate_transaction,
)

__all__ = [
    # Base
    "CURRENT_SCHEMA_VERSION",
    "PersistedStore",
    "SnapshotEnvelope",
    "migrate_state",
    # Stores
    "AccountsState",
    "AccountsStore",
    "CategoriesState",
    "CategoriesStore",
    "CategoryHierarchyError",
    "TransactionsState",
    "TransactionsStore",
    "validate_transaction",
]
