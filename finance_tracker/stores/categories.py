"""
Categories Store

Owns categories and category patterns, persisted under the
"categories-store" key.

Categories form a two-level tree. When a category is written through this
store and its parent exists, the parent must be a root category of the
same type. A parent that does not exist is tolerated: deleting a root
leaves its children pointing at a missing id, and lookups return None.
"""

from typing import Any, Optional, Union

from pydantic import Field

from finance_tracker.data.seed import seed_categories, seed_category_patterns
from finance_tracker.models.base import RecordModel
from finance_tracker.models.category import Category, CategoryPattern
from finance_tracker.models.transaction import TransactionType
from finance_tracker.stores.base import PersistedStore


class CategoryHierarchyError(ValueError):
    """A category write would break the two-level, same-type tree."""
    pass


class CategoriesState(RecordModel):
    """Persisted shape of the categories slice."""

    categories: list[Category] = Field(default_factory=list)
    patterns: list[CategoryPattern] = Field(default_factory=list)


class CategoriesStore(PersistedStore[CategoriesState]):
    """Category tree and auto-categorization patterns."""

    storage_key = "categories-store"
    state_model = CategoriesState
    seed_factories = {
        "categories": seed_categories,
        "patterns": seed_category_patterns,
    }

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    @property
    def categories(self) -> list[Category]:
        return list(self._state.categories)

    @property
    def patterns(self) -> list[CategoryPattern]:
        return list(self._state.patterns)

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        """Find a category. Returns None if it does not exist."""
        return self._find(self._state.categories, category_id)

    def get_subcategories(self, parent_id: str) -> list[Category]:
        """Children of a category, in stored order (empty if none)."""
        return [c for c in self._state.categories if c.parent_id == parent_id]

    def get_root_categories(self, category_type: Union[TransactionType, str]) -> list[Category]:
        """Root categories (no parent) of the given type."""
        category_type = TransactionType(category_type)
        return [
            c for c in self._state.categories
            if c.type == category_type and not c.parent_id
        ]

    def get_patterns_for_category(self, category_id: str) -> list[CategoryPattern]:
        return [p for p in self._state.patterns if p.category_id == category_id]

    def match_category(self, description: str) -> Optional[Category]:
        """
        Suggest a category for a transaction description.

        The matching pattern with the highest confidence wins (missing
        confidence counts as 0, ties keep stored order). Patterns whose
        category no longer exists are skipped.
        """
        best: Optional[tuple[float, Category]] = None
        for pattern in self._state.patterns:
            if not pattern.matches(description):
                continue
            category = self.get_category_by_id(pattern.category_id)
            if category is None:
                continue
            confidence = pattern.confidence or 0.0
            if best is None or confidence > best[0]:
                best = (confidence, category)
        return best[1] if best else None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _check_hierarchy(self, category: Category) -> None:
        if category.parent_id:
            if any(c.parent_id == category.id for c in self._state.categories):
                raise CategoryHierarchyError(
                    f"Category '{category.id}' has subcategories and cannot be nested"
                )
            parent = self.get_category_by_id(category.parent_id)
            if parent is None:
                return
            if parent.parent_id:
                raise CategoryHierarchyError(
                    f"Parent '{parent.id}' is itself a subcategory; only two levels are allowed"
                )
            if parent.type != category.type:
                raise CategoryHierarchyError(
                    f"Category type '{category.type.value}' does not match "
                    f"parent type '{parent.type.value}'"
                )
        else:
            mismatched = [
                c.id for c in self._state.categories
                if c.parent_id == category.id and c.type != category.type
            ]
            if mismatched:
                raise CategoryHierarchyError(
                    f"Subcategories {mismatched} do not match type '{category.type.value}'"
                )

    def add_category(self, data: Any) -> Category:
        """
        Create a category with a freshly generated id.

        Raises:
            CategoryHierarchyError: If the parent is a subcategory or of another type
        """
        return self._add_record(
            "categories",
            "category",
            Category.model_validate,
            data,
            check=self._check_hierarchy,
        )

    def update_category(self, category_id: str, **updates: Any) -> Optional[Category]:
        """Merge fields into a category. Returns None if the id is absent."""
        return self._update_record(
            "categories",
            "category",
            Category.model_validate,
            set(Category.model_fields),
            category_id,
            updates,
            check=self._check_hierarchy,
        )

    def delete_category(self, category_id: str) -> bool:
        """Remove a category. Children and transactions keep their references."""
        return self._delete_record("categories", "category", category_id)

    def add_pattern(self, data: Any) -> CategoryPattern:
        return self._add_record("patterns", "category_pattern", CategoryPattern.model_validate, data)

    def delete_pattern(self, pattern_id: str) -> bool:
        return self._delete_record("patterns", "category_pattern", pattern_id)
