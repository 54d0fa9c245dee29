"""Tests for the transactions store and its filter engine."""

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.models import (
    ProjectedTransaction,
    Transaction,
    TransactionFilter,
    TransactionType,
)
from finance_tracker.stores import TransactionsStore


@pytest.fixture
def store(document_store, storage_settings, audit_logger) -> TransactionsStore:
    return TransactionsStore(document_store, storage_settings, audit_logger)


class TestAddTransaction:
    """Tests for add_transaction."""

    def test_assigns_fresh_unique_id(self, store, expense_record):
        first = store.add_transaction(expense_record)
        second = store.add_transaction(expense_record)
        ids = [t.id for t in store.get_filtered_transactions()]
        assert len(ids) == 2
        assert len(set(ids)) == 2
        assert first.id in ids and second.id in ids

    def test_added_record_equals_input_plus_id(self, store, expense_record):
        created = store.add_transaction(expense_record)
        [stored] = store.get_filtered_transactions()
        assert stored == created
        assert stored.model_dump(exclude={"id"}) == Transaction(
            id="ignored", **expense_record
        ).model_dump(exclude={"id"})

    def test_text_is_stored_as_entered(self, store, expense_record):
        entered = {**expense_record, "description": "  Coffee  ", "category": "Food "}
        created = store.add_transaction(entered)
        assert created.description == "  Coffee  "
        assert created.category == "Food "
        assert created.model_dump(exclude={"id"}) == Transaction(
            id="ignored", **entered
        ).model_dump(exclude={"id"})

    def test_caller_id_is_replaced(self, store, expense_record):
        created = store.add_transaction({**expense_record, "id": "txn_mine"})
        assert created.id != "txn_mine"

    def test_appends_in_insertion_order(self, store, expense_record, income_record):
        a = store.add_transaction(expense_record)
        b = store.add_transaction(income_record)
        assert [t.id for t in store.transactions] == [a.id, b.id]

    def test_variant_follows_flag(self, store, expense_record, projected_record):
        store.add_transaction(expense_record)
        store.add_transaction(projected_record)
        assert [type(t) for t in store.transactions] == [Transaction, ProjectedTransaction]

    def test_accepts_model_input(self, store, expense_record):
        model = Transaction(id="draft", **expense_record)
        created = store.add_transaction(model)
        assert created.id != "draft"
        assert created.description == model.description

    def test_invalid_data_is_rejected(self, store, expense_record):
        with pytest.raises(ValueError):
            store.add_transaction({**expense_record, "amount": "-1"})
        assert store.transactions == []


class TestUpdateAndDelete:
    """Tests for update_transaction and delete_transaction."""

    def test_update_merges_fields(self, store, expense_record):
        created = store.add_transaction(expense_record)
        updated = store.update_transaction(created.id, amount=10, description="Corner shop")
        assert updated.amount == Decimal("10")
        assert updated.description == "Corner shop"
        assert updated.category == "cat_groceries"
        assert store.get_transaction_by_id(created.id) == updated

    def test_update_missing_id_is_noop(self, store, expense_record, income_record):
        store.add_transaction(expense_record)
        store.add_transaction(income_record)
        before = store.transactions

        assert store.update_transaction("does-not-exist", amount=10) is None
        assert store.transactions == before

    def test_update_can_switch_variant(self, store, projected_record):
        created = store.add_transaction(projected_record)
        posted = store.update_transaction(created.id, is_projected=False)
        assert isinstance(posted, Transaction)
        assert posted.id == created.id
        assert store.get_projected_transactions() == []

    def test_invalid_update_leaves_record(self, store, expense_record):
        created = store.add_transaction(expense_record)
        with pytest.raises(ValueError):
            store.update_transaction(created.id, amount=-3)
        assert store.get_transaction_by_id(created.id) == created

    def test_unknown_field_rejected(self, store, expense_record):
        created = store.add_transaction(expense_record)
        with pytest.raises(ValueError, match="Unknown transaction fields"):
            store.update_transaction(created.id, colour="red")

    def test_delete(self, store, expense_record, income_record):
        a = store.add_transaction(expense_record)
        b = store.add_transaction(income_record)
        assert store.delete_transaction(a.id) is True
        assert [t.id for t in store.transactions] == [b.id]

    def test_delete_missing_id_is_noop(self, store, expense_record):
        store.add_transaction(expense_record)
        assert store.delete_transaction("nope") is False
        assert len(store.transactions) == 1

    def test_delete_transactions_for_account(self, store, expense_record, income_record):
        store.add_transaction(expense_record)
        store.add_transaction({**income_record, "account_id": "acc_other"})
        assert store.delete_transactions_for_account("acc_checking_001") == 1
        assert [t.account_id for t in store.transactions] == ["acc_other"]


class TestFilters:
    """Tests for the filter/query engine."""

    def test_december_expense_scenario(self, store, expense_record, income_record):
        expense = store.add_transaction(expense_record)
        store.add_transaction(income_record)

        store.set_filters({
            "type": "expense",
            "start_date": "2025-12-01",
            "end_date": "2025-12-31",
        })

        assert store.get_filtered_transactions() == [expense]
        assert store.get_filtered_transactions()[0].amount == Decimal("49.99")

    def test_empty_filter_returns_all_in_order(self, store, expense_record, income_record):
        # Inserted out of date order on purpose: no implicit sort
        a = store.add_transaction(expense_record)
        b = store.add_transaction(income_record)
        assert [t.id for t in store.get_filtered_transactions()] == [a.id, b.id]

    def test_result_is_subset_satisfying_every_field(
        self, store, expense_record, income_record, projected_record
    ):
        store.add_transaction(expense_record)
        store.add_transaction(income_record)
        store.add_transaction(projected_record)
        store.add_transaction({**expense_record, "account_id": "acc_credit_001"})
        store.add_transaction({**expense_record, "date": "2025-11-30"})

        flt = TransactionFilter(
            start_date="2025-12-01",
            type="expense",
            account_id="acc_checking_001",
        )
        store.set_filters(flt)
        result = store.get_filtered_transactions()

        all_ids = {t.id for t in store.transactions}
        assert {t.id for t in result} <= all_ids
        assert len(result) == 2
        for txn in result:
            assert txn.date >= date(2025, 12, 1)
            assert txn.type == TransactionType.EXPENSE
            assert txn.account_id == "acc_checking_001"

    def test_category_filter_is_exact(self, store, expense_record):
        store.add_transaction(expense_record)
        store.set_filters({"category": "cat_grocer"})
        assert store.get_filtered_transactions() == []

    def test_category_filter_keeps_surrounding_spaces(self, store, expense_record):
        spaced = store.add_transaction({**expense_record, "category": "Food "})
        store.add_transaction({**expense_record, "category": "Food"})
        store.set_filters({"category": "Food "})
        assert store.filters.category == "Food "
        assert store.get_filtered_transactions() == [spaced]

    def test_empty_string_fields_do_not_constrain(self, store, expense_record, income_record):
        store.add_transaction(expense_record)
        store.add_transaction(income_record)
        store.set_filters({"category": "", "account_id": "", "start_date": ""})
        assert len(store.get_filtered_transactions()) == 2

    def test_set_filters_replaces_wholesale(self, store):
        store.set_filters({"type": "income", "category": "cat_salary"})
        store.set_filters({"account_id": "acc_1"})
        assert store.filters == TransactionFilter(account_id="acc_1")

    def test_clear_filters(self, store, expense_record, income_record):
        store.add_transaction(expense_record)
        store.add_transaction(income_record)
        store.set_filters({"type": "income"})
        assert len(store.get_filtered_transactions()) == 1
        store.clear_filters()
        assert store.filters.is_empty
        assert len(store.get_filtered_transactions()) == 2

    def test_actual_and_projected_selectors(self, store, expense_record, projected_record):
        actual = store.add_transaction(expense_record)
        projected = store.add_transaction(projected_record)
        assert store.get_actual_transactions() == [actual]
        assert store.get_projected_transactions() == [projected]

    def test_reference_queries(self, store, expense_record, income_record):
        store.add_transaction(expense_record)
        store.add_transaction(income_record)
        assert len(store.get_transactions_for_account("acc_checking_001")) == 2
        assert [t.category for t in store.get_transactions_for_category("cat_salary")] == [
            "cat_salary"
        ]


class TestBackgroundPersistence:
    """Tests for writes scheduled by actions."""

    @pytest.mark.asyncio
    async def test_action_persists_whole_slice(
        self, store, document_store, expense_record, parse_snapshot
    ):
        created = store.add_transaction(expense_record)
        store.set_filters({"type": "expense"})
        await store.flush()

        snapshot = parse_snapshot(await document_store.get("transactions-store"))
        assert snapshot["version"] == 2
        assert snapshot["state"]["filters"] == {"type": "expense"}
        [document] = snapshot["state"]["transactions"]
        assert document["id"] == created.id
        assert document["accountId"] == "acc_checking_001"
        assert document["isProjected"] is False

    @pytest.mark.asyncio
    async def test_entered_text_survives_reload(
        self, store, document_store, storage_settings, audit_logger, expense_record
    ):
        created = store.add_transaction(
            {**expense_record, "description": "  Coffee  ", "category": "Food "}
        )
        store.set_filters({"category": "Food "})
        await store.flush()

        reloaded = TransactionsStore(document_store, storage_settings, audit_logger)
        await reloaded.hydrate()
        assert reloaded.get_transaction_by_id(created.id) == created
        assert reloaded.filters.category == "Food "

    @pytest.mark.asyncio
    async def test_action_returns_before_write(self, store, document_store, expense_record):
        store.add_transaction(expense_record)
        assert store.has_pending_writes is True
        assert len(store.transactions) == 1
        await store.flush()
        assert store.has_pending_writes is False
        assert await document_store.get("transactions-store") is not None

    def test_action_without_running_loop_writes_immediately(
        self, store, document_store, expense_record
    ):
        store.add_transaction(expense_record)
        assert "transactions-store" in document_store.keys()
