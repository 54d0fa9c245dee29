"""Tests for the categories store."""

import pytest

from finance_tracker.models import TransactionType
from finance_tracker.stores import CategoryHierarchyError


class TestCategorySelectors:
    """Tests for lookups over the seeded category tree."""

    def test_get_subcategories_in_stored_order(self, categories_store):
        children = categories_store.get_subcategories("cat_living_expenses")
        assert [c.id for c in children] == ["cat_rent", "cat_groceries", "cat_utilities"]

    def test_get_subcategories_of_leaf_is_empty(self, categories_store):
        assert categories_store.get_subcategories("cat_groceries") == []
        assert categories_store.get_subcategories("cat_unknown") == []

    def test_get_root_categories(self, categories_store):
        roots = categories_store.get_root_categories(TransactionType.EXPENSE)
        assert [c.id for c in roots] == [
            "cat_living_expenses",
            "cat_transportation",
            "cat_entertainment",
        ]
        assert [c.id for c in categories_store.get_root_categories("income")] == ["cat_income"]

    def test_get_category_by_id(self, categories_store):
        assert categories_store.get_category_by_id("cat_fuel").parent_id == "cat_transportation"
        assert categories_store.get_category_by_id("cat_missing") is None

    def test_patterns_for_category(self, categories_store):
        patterns = categories_store.get_patterns_for_category("cat_groceries")
        assert [p.id for p in patterns] == ["pat_walmart_groceries"]


class TestMatchCategory:
    """Tests for pattern-based category suggestions."""

    def test_matches_regex_pattern(self, categories_store):
        assert categories_store.match_category("COSTCO wholesale").id == "cat_groceries"

    def test_highest_confidence_wins(self, categories_store):
        # "rent" (0.8) and "salary" (0.95) both match
        assert categories_store.match_category("salary for rent").id == "cat_salary"

    def test_no_match(self, categories_store):
        assert categories_store.match_category("Birthday present") is None

    def test_pattern_for_deleted_category_is_skipped(self, categories_store):
        categories_store.delete_category("cat_salary")
        assert categories_store.match_category("salary for rent").id == "cat_rent"


class TestCategoryActions:
    """Tests for category and pattern mutations."""

    def test_add_subcategory(self, categories_store):
        created = categories_store.add_category({
            "name": "Dining Out",
            "type": "expense",
            "parent_id": "cat_living_expenses",
            "keywords": ["restaurant"],
        })
        children = categories_store.get_subcategories("cat_living_expenses")
        assert children[-1] == created

    def test_add_root_category(self, categories_store):
        created = categories_store.add_category({"name": "Gifts", "type": "income"})
        assert created in categories_store.get_root_categories("income")

    def test_parent_must_be_root(self, categories_store):
        with pytest.raises(CategoryHierarchyError, match="only two levels"):
            categories_store.add_category(
                {"name": "Organic", "type": "expense", "parent_id": "cat_groceries"}
            )

    def test_parent_type_must_match(self, categories_store):
        with pytest.raises(CategoryHierarchyError, match="does not match"):
            categories_store.add_category(
                {"name": "Bonus", "type": "income", "parent_id": "cat_living_expenses"}
            )

    def test_hierarchy_error_is_value_error(self, categories_store):
        count = len(categories_store.categories)
        with pytest.raises(ValueError):
            categories_store.add_category(
                {"name": "Bonus", "type": "income", "parent_id": "cat_living_expenses"}
            )
        assert len(categories_store.categories) == count

    def test_missing_parent_is_tolerated(self, categories_store):
        created = categories_store.add_category(
            {"name": "Orphan", "type": "expense", "parent_id": "cat_gone"}
        )
        assert created.parent_id == "cat_gone"

    def test_cannot_nest_category_with_children(self, categories_store):
        with pytest.raises(CategoryHierarchyError, match="has subcategories"):
            categories_store.update_category("cat_transportation", parent_id="cat_living_expenses")

    def test_root_type_change_must_match_children(self, categories_store):
        with pytest.raises(CategoryHierarchyError):
            categories_store.update_category("cat_entertainment", type="income")
        assert categories_store.get_category_by_id("cat_entertainment").type == "expense"

    def test_update_category(self, categories_store):
        updated = categories_store.update_category("cat_fuel", color="#000000", icon="fuel")
        assert updated.color == "#000000"
        assert categories_store.get_category_by_id("cat_fuel").icon == "fuel"

    def test_update_missing_category(self, categories_store):
        assert categories_store.update_category("cat_missing", name="x") is None

    def test_delete_root_leaves_children_dangling(self, categories_store):
        assert categories_store.delete_category("cat_entertainment") is True
        child = categories_store.get_category_by_id("cat_subscriptions")
        assert child.parent_id == "cat_entertainment"
        assert categories_store.get_category_by_id(child.parent_id) is None

    def test_add_and_delete_pattern(self, categories_store):
        pattern = categories_store.add_pattern({
            "category_id": "cat_public_transit",
            "pattern": "metro",
            "match_type": "contains",
            "confidence": 0.99,
        })
        assert categories_store.match_category("Metro card top-up").id == "cat_public_transit"
        assert categories_store.delete_pattern(pattern.id) is True
        assert categories_store.match_category("Metro card top-up") is None
