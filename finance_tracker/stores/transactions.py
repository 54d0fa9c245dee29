"""
Transactions Store

Owns actual and projected transactions plus the active filter, persisted
under the "transactions-store" key.

Both variants live in one collection, in insertion order. Selectors never
sort; ordering is the caller's business.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import Field, TypeAdapter

from finance_tracker.audit import StoreEventType
from finance_tracker.data.seed import seed_all_transactions
from finance_tracker.models.base import RecordModel
from finance_tracker.models.transaction import (
    AnyTransaction,
    ProjectedTransaction,
    Transaction,
    TransactionFilter,
)
from finance_tracker.stores.base import PersistedStore


_any_transaction = TypeAdapter(AnyTransaction)

TRANSACTION_FIELDS = set(Transaction.model_fields) | set(ProjectedTransaction.model_fields)


def validate_transaction(data: dict[str, Any]) -> Union[Transaction, ProjectedTransaction]:
    """Validate raw data into the variant selected by is_projected."""
    return _any_transaction.validate_python(data)


class TransactionsState(RecordModel):
    """Persisted shape of the transactions slice."""

    transactions: list[AnyTransaction] = Field(default_factory=list)
    filters: TransactionFilter = Field(default_factory=TransactionFilter)


class TransactionsStore(PersistedStore[TransactionsState]):
    """Transactions, projections and the filter/query engine."""

    storage_key = "transactions-store"
    state_model = TransactionsState
    seed_factories = {"transactions": seed_all_transactions}

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> list[Union[Transaction, ProjectedTransaction]]:
        return list(self._state.transactions)

    @property
    def filters(self) -> TransactionFilter:
        return self._state.filters.model_copy()

    def get_transaction_by_id(
        self, transaction_id: str
    ) -> Optional[Union[Transaction, ProjectedTransaction]]:
        return self._find(self._state.transactions, transaction_id)

    def get_filtered_transactions(self) -> list[Union[Transaction, ProjectedTransaction]]:
        """
        Transactions matching every field of the active filter.

        An empty filter returns everything in stored order.
        """
        active = self._state.filters
        if active.is_empty:
            return list(self._state.transactions)
        return [t for t in self._state.transactions if active.matches(t)]

    def get_actual_transactions(self) -> list[Transaction]:
        return [t for t in self._state.transactions if isinstance(t, Transaction)]

    def get_projected_transactions(self) -> list[ProjectedTransaction]:
        return [t for t in self._state.transactions if isinstance(t, ProjectedTransaction)]

    def get_transactions_for_account(
        self, account_id: str
    ) -> list[Union[Transaction, ProjectedTransaction]]:
        """Every transaction (both variants) that references an account."""
        return [t for t in self._state.transactions if t.account_id == account_id]

    def get_transactions_for_category(
        self, category: str
    ) -> list[Union[Transaction, ProjectedTransaction]]:
        """Every transaction whose category field equals the given id or name."""
        return [t for t in self._state.transactions if t.category == category]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_transaction(self, data: Any) -> Union[Transaction, ProjectedTransaction]:
        """
        Append a transaction with a freshly generated id.

        The variant is chosen by the is_projected flag in the data (absent
        means an actual transaction). Any id in the data is replaced.
        """
        return self._add_record("transactions", "transaction", validate_transaction, data)

    def update_transaction(
        self, transaction_id: str, **updates: Any
    ) -> Optional[Union[Transaction, ProjectedTransaction]]:
        """
        Merge fields into the transaction with this id.

        No-op returning None when the id is absent. Changing is_projected
        switches the record to the other variant.
        """
        return self._update_record(
            "transactions",
            "transaction",
            validate_transaction,
            TRANSACTION_FIELDS,
            transaction_id,
            updates,
        )

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns False (no-op) when absent."""
        return self._delete_record("transactions", "transaction", transaction_id)

    def delete_transactions_for_account(self, account_id: str) -> int:
        """Remove every transaction posted to an account. Returns how many went."""
        doomed = [t.id for t in self._state.transactions if t.account_id == account_id]
        for transaction_id in doomed:
            self._delete_record("transactions", "transaction", transaction_id)
        return len(doomed)

    def set_filters(
        self, filters: Union[TransactionFilter, Mapping[str, Any], None]
    ) -> None:
        """Replace the active filter wholesale."""
        if filters is None:
            new_filters = TransactionFilter()
        elif isinstance(filters, TransactionFilter):
            new_filters = filters.model_copy()
        else:
            new_filters = TransactionFilter.model_validate(dict(filters))
        self._state.filters = new_filters
        self._commit(
            StoreEventType.FILTERS_CHANGED,
            "filter",
            self.storage_key,
            new_filters.to_document(),
        )

    def clear_filters(self) -> None:
        """Reset to the empty filter."""
        self.set_filters(None)
