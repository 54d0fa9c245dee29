"""
Report Builder

DESIGN DECISION: Reports are DETERMINISTIC reads over store slices.
Nothing here mutates a store or estimates values; every figure is a sum of
stored records. The presentation layer (dashboard, chart) only ever sees
these derived models.

Actual and projected transactions are kept apart in every aggregate so the
dashboard can draw "posted" and "forecast" lines side by side.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Optional, Union

from finance_tracker.charts.timeseries import TimePoint, normalize_points
from finance_tracker.models.report import (
    AccountSummary,
    CategoryAggregate,
    MonthlyAggregate,
)
from finance_tracker.models.transaction import (
    ProjectedTransaction,
    Transaction,
    TransactionType,
)
from finance_tracker.stores.accounts import AccountsStore
from finance_tracker.stores.transactions import TransactionsStore


ZERO = Decimal("0")


class ReportError(Exception):
    """Invalid report request."""
    pass


class ReportBuilder:
    """
    Builds dashboard aggregates from the transactions and accounts stores.

    GUARANTEES:
    - Only sums real records
    - Never sorts the underlying collections in place
    - Empty input gives empty reports, not errors
    """

    def __init__(self, transactions: TransactionsStore, accounts: AccountsStore):
        self._transactions = transactions
        self._accounts = accounts

    def monthly_aggregates(
        self,
        start_month: Optional[str] = None,
        end_month: Optional[str] = None,
    ) -> list[MonthlyAggregate]:
        """
        Income and expense per calendar month, oldest first.

        projected_income / projected_expense include the actual amounts
        plus the projections for that month.
        Months are "YYYY-MM" strings; bounds are inclusive.
        """
        if start_month and end_month and start_month > end_month:
            raise ReportError(f"start_month {start_month} is after end_month {end_month}")

        totals: dict[str, dict[str, Decimal]] = defaultdict(
            lambda: {
                "actual_income": ZERO,
                "projected_income": ZERO,
                "actual_expense": ZERO,
                "projected_expense": ZERO,
            }
        )

        for txn in self._transactions.transactions:
            month = txn.date.strftime("%Y-%m")
            if start_month and month < start_month:
                continue
            if end_month and month > end_month:
                continue

            direction = "income" if txn.type == TransactionType.INCOME else "expense"
            bucket = totals[month]
            if isinstance(txn, Transaction):
                bucket[f"actual_{direction}"] += txn.amount
                bucket[f"projected_{direction}"] += txn.amount
            elif isinstance(txn, ProjectedTransaction):
                bucket[f"projected_{direction}"] += txn.amount

        return [
            MonthlyAggregate(month=month, **values)
            for month, values in sorted(totals.items())
        ]

    def category_aggregates(
        self,
        transaction_type: Optional[Union[TransactionType, str]] = None,
    ) -> list[CategoryAggregate]:
        """
        Actual vs projected totals per category, largest first.

        percentage is each category's share of the combined
        (actual + projected) total across the returned categories.
        """
        wanted = TransactionType(transaction_type) if transaction_type else None

        actual: dict[str, Decimal] = defaultdict(lambda: ZERO)
        projected: dict[str, Decimal] = defaultdict(lambda: ZERO)
        order: list[str] = []

        for txn in self._transactions.transactions:
            if wanted is not None and txn.type != wanted:
                continue
            if txn.category not in actual and txn.category not in projected:
                order.append(txn.category)
            if isinstance(txn, ProjectedTransaction):
                projected[txn.category] += txn.amount
            else:
                actual[txn.category] += txn.amount

        grand_total = sum((actual[c] + projected[c] for c in order), ZERO)

        aggregates = [
            CategoryAggregate(
                category=category,
                actual_amount=actual[category],
                projected_amount=projected[category],
                percentage=(
                    float((actual[category] + projected[category]) / grand_total)
                    if grand_total
                    else None
                ),
            )
            for category in order
        ]
        aggregates.sort(key=lambda a: a.actual_amount + a.projected_amount, reverse=True)
        return aggregates

    def account_summaries(self) -> list[AccountSummary]:
        """
        Totals of actual transactions per account, in account order.

        balance is the stored account balance when present, otherwise
        the net of the account's actual transactions.
        """
        summaries = []
        actual = self._transactions.get_actual_transactions()

        for account in self._accounts.accounts:
            income = ZERO
            expense = ZERO
            for txn in actual:
                if txn.account_id != account.id:
                    continue
                if txn.type == TransactionType.INCOME:
                    income += txn.amount
                else:
                    expense += txn.amount

            net = income - expense
            summaries.append(
                AccountSummary(
                    account_id=account.id,
                    account_name=account.name,
                    currency_id=account.currency_id,
                    balance=account.balance if account.balance is not None else net,
                    total_income=income,
                    total_expense=expense,
                    net=net,
                )
            )
        return summaries

    def time_series(
        self,
        transaction_type: Union[TransactionType, str],
        projected: bool = False,
    ) -> list[TimePoint]:
        """
        Monthly chart points for one direction, ready for the chart widget.

        projected=False gives posted totals; projected=True gives the
        forecast line (actual plus projections).
        """
        direction = TransactionType(transaction_type).value
        field = f"{'projected' if projected else 'actual'}_{direction}"
        points = [
            {"time": aggregate.month, "value": float(getattr(aggregate, field))}
            for aggregate in self.monthly_aggregates()
        ]
        return normalize_points(points)
