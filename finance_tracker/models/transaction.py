"""
Transaction Models

Two record variants share one collection:
- Transaction: a posted/actual transaction (is_projected is always False)
- ProjectedTransaction: a forecast, possibly recurring (is_projected is always True)

AnyTransaction is a tagged union keyed on the is_projected flag. Code that
handles both variants branches with isinstance over the two classes.

Amounts are non-negative magnitudes. Direction is carried by `type`.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator
from pydantic.alias_generators import to_camel

from finance_tracker.models.base import RecordModel, range_rule, text_rule


class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence of a projected transaction."""
    ONCE = "once"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class _TransactionFields(RecordModel):
    id: str = Field(..., min_length=1)
    date: dt.date = Field(
        ...,
        description="Calendar date (next expected occurrence for projections)"
    )
    description: Annotated[str, text_rule(max_length=500)]
    amount: Annotated[Decimal, range_rule(ge=0)] = Field(
        ...,
        description="Non-negative magnitude in the account currency"
    )
    category: Annotated[str, text_rule()] = Field(
        ...,
        description="Category id or free-text category name"
    )
    type: TransactionType
    account_id: Annotated[str, text_rule()]
    currency_id: Annotated[str, text_rule()]


class Transaction(_TransactionFields):
    """A posted transaction."""

    is_projected: Literal[False] = False


class ProjectedTransaction(_TransactionFields):
    """A forecasted transaction that has not been posted yet."""

    is_projected: Literal[True] = True
    frequency: Optional[Frequency] = None


def transaction_variant(value: Any) -> str:
    """Pick the union tag from a raw document or an existing model."""
    if isinstance(value, dict):
        flag = value.get("isProjected", value.get("is_projected", False))
    else:
        flag = getattr(value, "is_projected", False)
    return "projected" if flag is True else "actual"


AnyTransaction = Annotated[
    Union[
        Annotated[Transaction, Tag("actual")],
        Annotated[ProjectedTransaction, Tag("projected")],
    ],
    Discriminator(transaction_variant),
]


class TransactionFilter(BaseModel):
    """
    Active filter for the transactions list.

    Every field is optional. A missing or empty-string field means
    "no constraint", never "match empty".
    Date bounds are inclusive.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    account_id: Optional[str] = None

    @field_validator('start_date', 'end_date', 'category', 'type', 'account_id', mode='before')
    @classmethod
    def empty_string_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.start_date,
                self.end_date,
                self.category,
                self.type,
                self.account_id,
            )
        )

    def matches(self, transaction: Union[Transaction, ProjectedTransaction]) -> bool:
        """Check a record against every present field (AND)."""
        if self.start_date is not None and transaction.date < self.start_date:
            return False
        if self.end_date is not None and transaction.date > self.end_date:
            return False
        if self.category is not None and transaction.category != self.category:
            return False
        if self.type is not None and transaction.type != self.type:
            return False
        if self.account_id is not None and transaction.account_id != self.account_id:
            return False
        return True

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
