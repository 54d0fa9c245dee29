"""
Referential Integrity Checks

DESIGN DECISION: Stores accept writes that leave references dangling
(deleting a category does not touch transactions that use it). Instead of
blocking or cascading on every write, this module reports dangling
references on demand:

- check()          → every reference that does not resolve
- references_to()  → "who references this id", for callers that want to
                     block or cascade a deletion themselves

IMPORTANT: Nothing here repairs data. It reports issues for review.
"""

from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.stores.accounts import AccountsStore
from finance_tracker.stores.categories import CategoriesStore
from finance_tracker.stores.transactions import TransactionsStore


class IntegrityIssue(BaseModel):
    """A reference that does not resolve."""

    record_type: str = Field(
        ...,
        description="Type of the record holding the reference (e.g. 'transaction')"
    )
    record_id: str
    field: str = Field(
        ...,
        description="Field holding the dangling id (e.g. 'account_id')"
    )
    missing_id: str
    message: str
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
    )


class Reference(BaseModel):
    """A record field that points at some id."""

    record_type: str
    record_id: str
    field: str


class ReferenceChecker:
    """
    Cross-store reference validation.

    Errors: ids that must resolve (account, institution, currency, parent).
    Warnings: a transaction category that matches neither a category id
    nor a category name; free-text categories are allowed but suspicious.
    """

    def __init__(
        self,
        accounts: AccountsStore,
        categories: CategoriesStore,
        transactions: TransactionsStore,
    ):
        self._accounts = accounts
        self._categories = categories
        self._transactions = transactions

    def _missing(
        self,
        record_type: str,
        record_id: str,
        field: str,
        missing_id: str,
        target: str,
        severity: str = "error",
    ) -> IntegrityIssue:
        return IntegrityIssue(
            record_type=record_type,
            record_id=record_id,
            field=field,
            missing_id=missing_id,
            message=f"{record_type} '{record_id}' references missing {target} '{missing_id}'",
            severity=severity,
        )

    def check(self) -> list[IntegrityIssue]:
        """Find every dangling reference across the three stores."""
        issues = []

        institution_ids = {i.id for i in self._accounts.institutions}
        currency_ids = {c.id for c in self._accounts.currencies}
        account_ids = {a.id for a in self._accounts.accounts}
        categories = self._categories.categories
        category_ids = {c.id for c in categories}
        category_names = {c.name.lower() for c in categories}

        for account in self._accounts.accounts:
            if account.institution_id not in institution_ids:
                issues.append(self._missing(
                    "account", account.id, "institution_id",
                    account.institution_id, "institution",
                ))
            if account.currency_id not in currency_ids:
                issues.append(self._missing(
                    "account", account.id, "currency_id",
                    account.currency_id, "currency",
                ))

        for category in categories:
            if category.parent_id and category.parent_id not in category_ids:
                issues.append(self._missing(
                    "category", category.id, "parent_id",
                    category.parent_id, "category",
                ))

        for pattern in self._categories.patterns:
            if pattern.category_id not in category_ids:
                issues.append(self._missing(
                    "category_pattern", pattern.id, "category_id",
                    pattern.category_id, "category",
                ))

        for txn in self._transactions.transactions:
            if txn.account_id not in account_ids:
                issues.append(self._missing(
                    "transaction", txn.id, "account_id", txn.account_id, "account",
                ))
            if txn.currency_id not in currency_ids:
                issues.append(self._missing(
                    "transaction", txn.id, "currency_id", txn.currency_id, "currency",
                ))
            if (
                txn.category not in category_ids
                and txn.category.lower() not in category_names
            ):
                issues.append(self._missing(
                    "transaction", txn.id, "category", txn.category, "category",
                    severity="warning",
                ))

        return issues

    def references_to(self, entity_id: str, entity_type: Optional[str] = None) -> list[Reference]:
        """
        List every record field that points at an id.

        Args:
            entity_id: The id being looked up
            entity_type: Restrict to one target type
                         ('account', 'institution', 'currency', 'category')
        """
        refs = []

        def want(target: str) -> bool:
            return entity_type is None or entity_type == target

        if want("institution"):
            refs.extend(
                Reference(record_type="account", record_id=a.id, field="institution_id")
                for a in self._accounts.get_accounts_by_institution(entity_id)
            )
        if want("currency"):
            refs.extend(
                Reference(record_type="account", record_id=a.id, field="currency_id")
                for a in self._accounts.accounts
                if a.currency_id == entity_id
            )
            refs.extend(
                Reference(record_type="transaction", record_id=t.id, field="currency_id")
                for t in self._transactions.transactions
                if t.currency_id == entity_id
            )
        if want("account"):
            refs.extend(
                Reference(record_type="transaction", record_id=t.id, field="account_id")
                for t in self._transactions.get_transactions_for_account(entity_id)
            )
        if want("category"):
            refs.extend(
                Reference(record_type="category", record_id=c.id, field="parent_id")
                for c in self._categories.get_subcategories(entity_id)
            )
            refs.extend(
                Reference(record_type="category_pattern", record_id=p.id, field="category_id")
                for p in self._categories.get_patterns_for_category(entity_id)
            )
            refs.extend(
                Reference(record_type="transaction", record_id=t.id, field="category")
                for t in self._transactions.get_transactions_for_category(entity_id)
            )
        return refs

    def is_referenced(self, entity_id: str, entity_type: Optional[str] = None) -> bool:
        return bool(self.references_to(entity_id, entity_type))
