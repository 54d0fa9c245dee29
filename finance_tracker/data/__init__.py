"""Seed data package."""

from finance_tracker.data.seed import (
    seed_accounts,
    seed_all_transactions,
    seed_categories,
    seed_category_patterns,
    seed_currencies,
    seed_institutions,
    seed_projected_transactions,
    seed_transactions,
)

__all__ = [
    "seed_accounts",
    "seed_all_transactions",
    "seed_categories",
    "seed_category_patterns",
    "seed_currencies",
    "seed_institutions",
    "seed_projected_transactions",
    "seed_transactions",
]
