"""
Accounts Store

Owns accounts, institutions and currencies in one slice, persisted under
the "accounts-store" key. Each of the three collections is seeded on its
own when empty, so a user who deleted every account keeps their custom
currencies.
"""

from typing import Any, Optional

from pydantic import Field

from finance_tracker.data.seed import seed_accounts, seed_currencies, seed_institutions
from finance_tracker.models.account import Account, Currency, Institution
from finance_tracker.models.base import RecordModel
from finance_tracker.stores.base import PersistedStore


class AccountsState(RecordModel):
    """Persisted shape of the accounts slice."""

    accounts: list[Account] = Field(default_factory=list)
    institutions: list[Institution] = Field(default_factory=list)
    currencies: list[Currency] = Field(default_factory=list)


class AccountsStore(PersistedStore[AccountsState]):
    """Accounts, institutions and currencies."""

    storage_key = "accounts-store"
    state_model = AccountsState
    seed_factories = {
        "accounts": seed_accounts,
        "institutions": seed_institutions,
        "currencies": seed_currencies,
    }

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    @property
    def accounts(self) -> list[Account]:
        return list(self._state.accounts)

    @property
    def institutions(self) -> list[Institution]:
        return list(self._state.institutions)

    @property
    def currencies(self) -> list[Currency]:
        return list(self._state.currencies)

    def get_institution_by_id(self, institution_id: str) -> Optional[Institution]:
        """Find an institution. Returns None if it does not exist."""
        return self._find(self._state.institutions, institution_id)

    def get_account_by_id(self, account_id: str) -> Optional[Account]:
        return self._find(self._state.accounts, account_id)

    def get_currency_by_id(self, currency_id: str) -> Optional[Currency]:
        return self._find(self._state.currencies, currency_id)

    def get_accounts_by_institution(self, institution_id: str) -> list[Account]:
        """Accounts held at an institution, in stored order."""
        return [a for a in self._state.accounts if a.institution_id == institution_id]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_account(self, data: Any) -> Account:
        """
        Create an account with a freshly generated id.

        Raises:
            ValueError: If the data is invalid (e.g. sub type outside its type family)
        """
        return self._add_record("accounts", "account", Account.model_validate, data)

    def update_account(self, account_id: str, **updates: Any) -> Optional[Account]:
        """Merge fields into an account. Returns None if the id is absent."""
        return self._update_record(
            "accounts",
            "account",
            Account.model_validate,
            set(Account.model_fields),
            account_id,
            updates,
        )

    def delete_account(self, account_id: str) -> bool:
        """
        Remove an account.

        Transactions posted to it are not touched; use
        FinanceTracker.delete_account_cascade to remove both.
        """
        return self._delete_record("accounts", "account", account_id)

    def add_institution(self, data: Any) -> Institution:
        return self._add_record("institutions", "institution", Institution.model_validate, data)

    def add_currency(self, data: Any) -> Currency:
        return self._add_record("currencies", "currency", Currency.model_validate, data)
