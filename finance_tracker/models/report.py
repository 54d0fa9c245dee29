"""
Derived read models.

These are never persisted. They are computed from store slices by
finance_tracker.queries.reports and handed to the presentation layer.
Totals are plain sums: loaded records may carry negative amounts, so no
sign is assumed here.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class AccountSummary(BaseModel):
    """Income, expense and balance for one account."""

    account_id: str
    account_name: str
    currency_id: str
    balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    net: Decimal = Field(description="total_income - total_expense")


class CategoryAggregate(BaseModel):
    """Actual vs projected totals for one category."""

    category: str
    actual_amount: Decimal
    projected_amount: Decimal
    percentage: Optional[float] = Field(
        default=None,
        description="Share of the combined total, e.g. 0.18 for 18%"
    )


class MonthlyAggregate(BaseModel):
    """
    Totals for one calendar month.

    projected_* figures include the actual figures plus projections.
    """

    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    actual_income: Decimal
    projected_income: Decimal
    actual_expense: Decimal
    projected_expense: Decimal

    @property
    def actual_net(self) -> Decimal:
        return self.actual_income - self.actual_expense
