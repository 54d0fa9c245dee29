"""Shared fixtures: in-memory storage and zero-wait retry settings."""

import asyncio
import json
from typing import Any, Optional

import pytest

from finance_tracker.audit import StoreAuditLogger
from finance_tracker.config import StorageSettings
from finance_tracker.services.storage import InMemoryDocumentStore, StorageError
from finance_tracker.stores import AccountsStore, CategoriesStore, TransactionsStore


class FlakyDocumentStore(InMemoryDocumentStore):
    """
    In-memory store whose writes fail a set number of times.

    failure="reject" makes set() return False, failure="raise" raises
    StorageError.
    """

    def __init__(self, failures: int = 0, failure: str = "reject", **kwargs):
        super().__init__(**kwargs)
        self.failures = failures
        self.failure = failure
        self.set_calls = 0

    async def set(self, key: str, blob: str) -> bool:
        self.set_calls += 1
        if self.failures > 0:
            self.failures -= 1
            if self.failure == "raise":
                raise StorageError("disk quota exceeded")
            return False
        return await super().set(key, blob)


def make_snapshot(state: Any, version: int = 2) -> str:
    return json.dumps({"state": state, "version": version})


def read_snapshot(blob: Optional[str]) -> dict:
    assert blob is not None
    return json.loads(blob)


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        backend="memory",
        write_retry_attempts=3,
        write_retry_multiplier=0,
        write_retry_min_wait=0,
        write_retry_max_wait=0,
    )


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def audit_logger() -> StoreAuditLogger:
    return StoreAuditLogger(history_size=1000)


@pytest.fixture
def expense_record() -> dict:
    return {
        "date": "2025-12-15",
        "description": "Grocery shopping at Walmart",
        "amount": "49.99",
        "category": "cat_groceries",
        "type": "expense",
        "account_id": "acc_checking_001",
        "currency_id": "USD",
    }


@pytest.fixture
def income_record() -> dict:
    return {
        "date": "2025-12-10",
        "description": "Salary deposit",
        "amount": "3000",
        "category": "cat_salary",
        "type": "income",
        "account_id": "acc_checking_001",
        "currency_id": "USD",
    }


@pytest.fixture
def projected_record() -> dict:
    return {
        "date": "2026-01-01",
        "description": "Monthly rent",
        "amount": "1200",
        "category": "cat_rent",
        "type": "expense",
        "account_id": "acc_checking_001",
        "currency_id": "USD",
        "is_projected": True,
        "frequency": "monthly",
    }


@pytest.fixture
def flaky_store_class() -> type[FlakyDocumentStore]:
    return FlakyDocumentStore


@pytest.fixture
def snapshot():
    """Build a persisted snapshot blob."""
    return make_snapshot


@pytest.fixture
def parse_snapshot():
    """Parse a persisted snapshot blob."""
    return read_snapshot


def settle(store):
    """Hydrate a store and let first-run seeding finish, outside any loop."""
    asyncio.run(store.wait_until_settled())
    return store


@pytest.fixture
def accounts_store(document_store, storage_settings, audit_logger) -> AccountsStore:
    """Accounts store hydrated from an empty backend, i.e. holding seed data."""
    return settle(AccountsStore(document_store, storage_settings, audit_logger))


@pytest.fixture
def categories_store(document_store, storage_settings, audit_logger) -> CategoriesStore:
    return settle(CategoriesStore(document_store, storage_settings, audit_logger))


@pytest.fixture
def seeded_transactions_store(document_store, storage_settings, audit_logger) -> TransactionsStore:
    return settle(TransactionsStore(document_store, storage_settings, audit_logger))
