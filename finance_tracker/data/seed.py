"""
Seed Data

Deterministic default datasets used for first-run population and as the
migration fallback for snapshots older than the current schema version.

The raw records are kept as immutable tuples. Each seed_* function
validates them into fresh model instances, so callers can mutate what
they receive without touching the defaults.
"""

from typing import Union

from finance_tracker.models.account import Account, Currency, Institution
from finance_tracker.models.category import Category, CategoryPattern
from finance_tracker.models.transaction import ProjectedTransaction, Transaction


# =============================================================================
# ACCOUNTS SLICE
# =============================================================================

_CURRENCIES = (
    {"id": "USD", "code": "USD", "symbol": "$", "name": "United States Dollar"},
    {"id": "EUR", "code": "EUR", "symbol": "€", "name": "Euro"},
    {"id": "GBP", "code": "GBP", "symbol": "£", "name": "British Pound Sterling"},
    {"id": "PKR", "code": "PKR", "symbol": "₨", "name": "Pakistani Rupee"},
)

_INSTITUTIONS = (
    {"id": "inst_chase_001", "name": "Chase Bank", "type": "bank"},
    {"id": "inst_amex_001", "name": "American Express", "type": "bank"},
    {"id": "inst_vanguard_001", "name": "Vanguard", "type": "broker"},
    {"id": "inst_coinbase_001", "name": "Coinbase", "type": "crypto_exchange"},
)

_ACCOUNTS = (
    {
        "id": "acc_checking_001",
        "name": "Personal Checking",
        "type": "checking",
        "subType": "checking_personal",
        "institutionId": "inst_chase_001",
        "currencyId": "USD",
        "balance": "2450.75",
        "createdAt": "2025-11-15T09:30:00Z",
    },
    {
        "id": "acc_savings_001",
        "name": "Emergency Fund",
        "type": "savings",
        "subType": "savings_emergency",
        "institutionId": "inst_chase_001",
        "currencyId": "USD",
        "balance": "10000.00",
        "createdAt": "2025-11-15T09:35:00Z",
    },
    {
        "id": "acc_credit_001",
        "name": "Amex Gold",
        "type": "credit_card",
        "subType": "credit_card_personal",
        "institutionId": "inst_amex_001",
        "currencyId": "USD",
        "balance": "-320.45",
        "createdAt": "2025-11-16T14:00:00Z",
    },
    {
        "id": "acc_invest_001",
        "name": "Brokerage",
        "type": "investment",
        "subType": "investment_stocks",
        "institutionId": "inst_vanguard_001",
        "currencyId": "USD",
        "createdAt": "2025-11-20T10:00:00Z",
    },
    {
        "id": "acc_crypto_001",
        "name": "Crypto Wallet",
        "type": "investment",
        "subType": "investment_crypto",
        "institutionId": "inst_coinbase_001",
        "currencyId": "USD",
        "createdAt": "2025-11-20T10:05:00Z",
    },
)


# =============================================================================
# CATEGORIES SLICE
# =============================================================================

_CATEGORIES = (
    # Income
    {"id": "cat_income", "name": "Income", "type": "income",
     "icon": "wallet", "color": "#10B981"},
    {"id": "cat_salary", "name": "Salary", "type": "income",
     "parentId": "cat_income", "keywords": ["payroll", "salary", "direct deposit"],
     "icon": "briefcase", "color": "#059669"},
    {"id": "cat_freelance", "name": "Freelance", "type": "income",
     "parentId": "cat_income", "keywords": ["invoice", "upwork", "fiverr"],
     "icon": "laptop", "color": "#34D399"},
    # Living expenses
    {"id": "cat_living_expenses", "name": "Living Expenses", "type": "expense",
     "description": "Housing, food and utilities", "icon": "home", "color": "#6366F1"},
    {"id": "cat_rent", "name": "Rent", "type": "expense",
     "parentId": "cat_living_expenses", "keywords": ["rent", "landlord"],
     "icon": "key", "color": "#818CF8"},
    {"id": "cat_groceries", "name": "Groceries", "type": "expense",
     "parentId": "cat_living_expenses", "description": "Food and household supplies",
     "keywords": ["supermarket", "walmart", "food"],
     "icon": "shopping-cart", "color": "#34D399"},
    {"id": "cat_utilities", "name": "Utilities", "type": "expense",
     "parentId": "cat_living_expenses", "keywords": ["electricity", "water", "gas", "internet"],
     "icon": "zap", "color": "#F59E0B"},
    # Transportation
    {"id": "cat_transportation", "name": "Transportation", "type": "expense",
     "icon": "car", "color": "#3B82F6"},
    {"id": "cat_fuel", "name": "Fuel", "type": "expense",
     "parentId": "cat_transportation", "keywords": ["shell", "chevron", "fuel"],
     "icon": "droplet", "color": "#60A5FA"},
    {"id": "cat_public_transit", "name": "Public Transit", "type": "expense",
     "parentId": "cat_transportation", "keywords": ["metro", "bus", "train"],
     "icon": "train", "color": "#93C5FD"},
    # Entertainment
    {"id": "cat_entertainment", "name": "Entertainment", "type": "expense",
     "icon": "film", "color": "#A855F7"},
    {"id": "cat_subscriptions", "name": "Subscriptions", "type": "expense",
     "parentId": "cat_entertainment", "keywords": ["netflix", "spotify"],
     "icon": "repeat", "color": "#C084FC"},
)

_CATEGORY_PATTERNS = (
    {"id": "pat_walmart_groceries", "categoryId": "cat_groceries",
     "pattern": "walmart|costco", "matchType": "regex", "confidence": 0.9},
    {"id": "pat_salary", "categoryId": "cat_salary",
     "pattern": "salary", "matchType": "contains", "confidence": 0.95},
    {"id": "pat_rent", "categoryId": "cat_rent",
     "pattern": "rent", "matchType": "contains", "confidence": 0.8},
    {"id": "pat_streaming", "categoryId": "cat_subscriptions",
     "pattern": r"\b(netflix|spotify)\b", "matchType": "regex", "confidence": 0.85},
    {"id": "pat_fuel", "categoryId": "cat_fuel",
     "pattern": "fuel", "matchType": "contains", "confidence": 0.7},
)


# =============================================================================
# TRANSACTIONS SLICE
# =============================================================================

_TRANSACTIONS = (
    {"id": "txn_001", "date": "2025-11-10", "description": "Salary deposit",
     "amount": "3000.00", "category": "cat_salary", "type": "income",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_002", "date": "2025-11-20", "description": "Fuel at Shell",
     "amount": "60.00", "category": "cat_fuel", "type": "expense",
     "accountId": "acc_credit_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_003", "date": "2025-11-28", "description": "Netflix subscription",
     "amount": "15.49", "category": "cat_subscriptions", "type": "expense",
     "accountId": "acc_credit_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_004", "date": "2025-12-01", "description": "Rent payment",
     "amount": "1200.00", "category": "cat_rent", "type": "expense",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_005", "date": "2025-12-10", "description": "Salary deposit",
     "amount": "3000.00", "category": "cat_salary", "type": "income",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_006", "date": "2025-12-15", "description": "Grocery shopping at Walmart",
     "amount": "49.99", "category": "cat_groceries", "type": "expense",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": False},
    {"id": "txn_007", "date": "2025-12-18", "description": "Electricity bill",
     "amount": "85.40", "category": "cat_utilities", "type": "expense",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": False},
)

_PROJECTED_TRANSACTIONS = (
    {"id": "ptxn_2026_01_rent", "date": "2026-01-01", "description": "Monthly rent",
     "amount": "1200.00", "category": "cat_rent", "type": "expense",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": True,
     "frequency": "monthly"},
    {"id": "ptxn_2026_01_salary", "date": "2026-01-10", "description": "Monthly salary",
     "amount": "3000.00", "category": "cat_salary", "type": "income",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": True,
     "frequency": "monthly"},
    {"id": "ptxn_2026_01_groceries", "date": "2026-01-15", "description": "Groceries budget",
     "amount": "350.00", "category": "cat_groceries", "type": "expense",
     "accountId": "acc_checking_001", "currencyId": "USD", "isProjected": True,
     "frequency": "monthly"},
    {"id": "ptxn_2026_03_insurance", "date": "2026-03-01", "description": "Car insurance",
     "amount": "420.00", "category": "cat_transportation", "type": "expense",
     "accountId": "acc_credit_001", "currencyId": "USD", "isProjected": True,
     "frequency": "quarterly"},
)


def seed_currencies() -> list[Currency]:
    return [Currency.model_validate(record) for record in _CURRENCIES]


def seed_institutions() -> list[Institution]:
    return [Institution.model_validate(record) for record in _INSTITUTIONS]


def seed_accounts() -> list[Account]:
    return [Account.model_validate(record) for record in _ACCOUNTS]


def seed_categories() -> list[Category]:
    return [Category.model_validate(record) for record in _CATEGORIES]


def seed_category_patterns() -> list[CategoryPattern]:
    return [CategoryPattern.model_validate(record) for record in _CATEGORY_PATTERNS]


def seed_transactions() -> list[Transaction]:
    return [Transaction.model_validate(record) for record in _TRANSACTIONS]


def seed_projected_transactions() -> list[ProjectedTransaction]:
    return [ProjectedTransaction.model_validate(record) for record in _PROJECTED_TRANSACTIONS]


def seed_all_transactions() -> list[Union[Transaction, ProjectedTransaction]]:
    """Actual transactions followed by projected ones, as stored on first run."""
    return [*seed_transactions(), *seed_projected_transactions()]
