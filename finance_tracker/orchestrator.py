"""
Main Orchestrator for Finance Tracker

This module ties the stores together:
1. Builds one shared document store
2. Builds the three domain stores on top of it
3. Hydrates them and waits for first-run seeding
4. Offers the few operations that span more than one store

DESIGN DECISION: Stores are plain instances created once at startup and
passed to whoever needs them. There is no module-level store singleton.

No operation here is atomic across stores. Cross-store operations run
their steps in a fixed order and each step persists on its own.
"""

import asyncio
import logging
from typing import Optional

from finance_tracker.audit import StoreAuditLogger
from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.queries import ReportBuilder
from finance_tracker.services.storage import (
    DocumentStoreInterface,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
)
from finance_tracker.stores import AccountsStore, CategoriesStore, TransactionsStore
from finance_tracker.validation import ReferenceChecker


class FinanceTracker:
    """
    Container for the three domain stores.

    Hand this (or the individual stores) to the presentation layer.
    """

    def __init__(
        self,
        accounts: AccountsStore,
        categories: CategoriesStore,
        transactions: TransactionsStore,
        audit_logger: Optional[StoreAuditLogger] = None,
    ):
        self.accounts = accounts
        self.categories = categories
        self.transactions = transactions
        self.audit_logger = audit_logger
        self.reports = ReportBuilder(transactions, accounts)
        self.integrity = ReferenceChecker(accounts, categories, transactions)

    @property
    def stores(self) -> tuple[AccountsStore, CategoriesStore, TransactionsStore]:
        return self.accounts, self.categories, self.transactions

    async def hydrate(self) -> None:
        """Hydrate every store, then wait for seeding and its writes."""
        await asyncio.gather(*(store.hydrate() for store in self.stores))
        for store in self.stores:
            await store.wait_until_settled()

    async def flush(self) -> None:
        """Wait for every pending snapshot write."""
        for store in self.stores:
            await store.flush()

    def delete_account_cascade(self, account_id: str) -> int:
        """
        Delete an account and every transaction posted to it.

        Transactions go first so a crash in between never leaves
        transactions without their account.

        Returns:
            Number of transactions removed
        """
        removed = self.transactions.delete_transactions_for_account(account_id)
        self.accounts.delete_account(account_id)
        return removed

    def delete_category_if_unused(self, category_id: str) -> bool:
        """
        Delete a category only when nothing references it.

        Returns:
            True if deleted, False if it is referenced or does not exist
        """
        if self.integrity.is_referenced(category_id, "category"):
            return False
        return self.categories.delete_category(category_id)


def create_document_store(settings: Optional[StorageSettings] = None) -> DocumentStoreInterface:
    """Build the configured document store backend."""
    settings = settings or get_settings().storage
    if settings.backend == "memory":
        return InMemoryDocumentStore()
    return JsonFileDocumentStore(settings.data_path)


async def create_app_components(
    document_store: Optional[DocumentStoreInterface] = None,
    settings: Optional[StorageSettings] = None,
    hydrate: bool = True,
) -> FinanceTracker:
    """
    Factory function to create all application components.

    Args:
        document_store: Shared storage backend. Built from settings if None.
        settings: Storage settings. Loaded from the environment if None.
        hydrate: Load snapshots and run first-run seeding before returning.

    Returns:
        A FinanceTracker holding the three stores
    """
    app_settings = get_settings().app
    logging.getLogger("finance_tracker").setLevel(app_settings.log_level.upper())

    settings = settings or get_settings().storage
    document_store = document_store or create_document_store(settings)
    audit_logger = StoreAuditLogger(history_size=app_settings.event_history_size)

    tracker = FinanceTracker(
        accounts=AccountsStore(document_store, settings, audit_logger),
        categories=CategoriesStore(document_store, settings, audit_logger),
        transactions=TransactionsStore(document_store, settings, audit_logger),
        audit_logger=audit_logger,
    )

    if hydrate:
        await tracker.hydrate()

    return tracker
