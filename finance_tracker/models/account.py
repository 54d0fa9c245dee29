"""
Account Models

Currencies, institutions and accounts. Accounts reference both an
institution and a currency by id.

DESIGN DECISION: The account sub-type family rule (checking_* only under
type=checking, etc.) is a write rule: every add or update through a store
rejects a mismatched pair, while accounts saved by earlier clients with a
mismatched pair still load.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import Field, ValidationInfo, model_validator

from finance_tracker.models.base import RecordModel, is_loading, text_rule


class AccountType(str, Enum):
    """High-level account type."""
    CREDIT_CARD = "credit_card"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    CHECKING = "checking"


class AccountSubType(str, Enum):
    """Finer account type, nested under an AccountType family."""
    CREDIT_CARD_PERSONAL = "credit_card_personal"
    CREDIT_CARD_CORPORATE = "credit_card_corporate"
    SAVINGS_EMERGENCY = "savings_emergency"
    SAVINGS_GOAL = "savings_goal"
    INVESTMENT_STOCKS = "investment_stocks"
    INVESTMENT_CRYPTO = "investment_crypto"
    INVESTMENT_MUTUAL_FUNDS = "investment_mutual_funds"
    CHECKING_PERSONAL = "checking_personal"
    CHECKING_BUSINESS = "checking_business"

    @property
    def family(self) -> AccountType:
        """The AccountType this sub-type belongs to."""
        return SUBTYPE_FAMILIES[self]


SUBTYPE_FAMILIES: dict[AccountSubType, AccountType] = {
    AccountSubType.CREDIT_CARD_PERSONAL: AccountType.CREDIT_CARD,
    AccountSubType.CREDIT_CARD_CORPORATE: AccountType.CREDIT_CARD,
    AccountSubType.SAVINGS_EMERGENCY: AccountType.SAVINGS,
    AccountSubType.SAVINGS_GOAL: AccountType.SAVINGS,
    AccountSubType.INVESTMENT_STOCKS: AccountType.INVESTMENT,
    AccountSubType.INVESTMENT_CRYPTO: AccountType.INVESTMENT,
    AccountSubType.INVESTMENT_MUTUAL_FUNDS: AccountType.INVESTMENT,
    AccountSubType.CHECKING_PERSONAL: AccountType.CHECKING,
    AccountSubType.CHECKING_BUSINESS: AccountType.CHECKING,
}


class Currency(RecordModel):
    """A currency. The id is often the same as the ISO code."""

    id: str = Field(..., min_length=1)
    code: Annotated[str, text_rule(min_length=3, max_length=10)] = Field(
        ...,
        description="ISO 4217 style code, e.g. USD"
    )
    symbol: Annotated[str, text_rule(max_length=10)]
    name: Annotated[str, text_rule(max_length=100)]


class Institution(RecordModel):
    """A bank, broker, exchange or any other account holder."""

    id: str = Field(..., min_length=1)
    name: Annotated[str, text_rule(max_length=200)]
    type: Annotated[str, text_rule(max_length=50)] = Field(
        ...,
        description="Free-form tag: bank, broker, crypto_exchange..."
    )


class Account(RecordModel):
    """A financial account held at an institution."""

    id: str = Field(..., min_length=1)
    name: Annotated[str, text_rule(max_length=200)]
    type: AccountType
    sub_type: AccountSubType
    institution_id: Annotated[str, text_rule()]
    currency_id: Annotated[str, text_rule()]
    balance: Optional[Decimal] = Field(
        default=None,
        description="Current balance in the account currency"
    )
    created_at: datetime = Field(
        ...,
        description="When the account was created"
    )

    @model_validator(mode='after')
    def validate_sub_type_family(self, info: ValidationInfo) -> 'Account':
        """Sub-type must belong to the family of its type (new writes only)."""
        if not is_loading(info) and self.sub_type.family != self.type:
            raise ValueError(
                f"Account sub type '{self.sub_type.value}' does not belong "
                f"to account type '{self.type.value}'"
            )
        return self
