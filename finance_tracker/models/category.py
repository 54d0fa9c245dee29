"""
Category Models

Categories form a two-level tree: root categories have no parent_id,
children reference a root. Patterns hint auto-categorization.
"""

import re
from enum import Enum
from typing import Annotated, Optional

from pydantic import Field, ValidationInfo, model_validator

from finance_tracker.models.base import RecordModel, is_loading, range_rule, text_rule
from finance_tracker.models.transaction import TransactionType


class PatternMatchType(str, Enum):
    """How a CategoryPattern is applied to a description."""
    REGEX = "regex"
    CONTAINS = "contains"


class Category(RecordModel):
    """An income or expense category."""

    id: str = Field(..., min_length=1)
    name: Annotated[str, text_rule(max_length=100)]
    type: TransactionType
    parent_id: Optional[str] = Field(
        default=None,
        description="Parent category id; None for root categories"
    )
    description: Annotated[Optional[str], text_rule(min_length=0, max_length=500)] = None
    keywords: list[str] = Field(
        default_factory=list,
        description="Hints for auto-matching"
    )
    icon: Annotated[Optional[str], text_rule(min_length=0, max_length=50)] = None
    color: Annotated[Optional[str], text_rule(min_length=0, max_length=50)] = Field(
        default=None,
        description="Hex or CSS color"
    )

    @property
    def is_root(self) -> bool:
        return not self.parent_id

    @model_validator(mode='after')
    def validate_not_own_parent(self, info: ValidationInfo) -> 'Category':
        if not is_loading(info) and self.parent_id and self.parent_id == self.id:
            raise ValueError("Category cannot be its own parent")
        return self


class CategoryPattern(RecordModel):
    """A text or regex pattern linked to a category."""

    id: str = Field(..., min_length=1)
    category_id: Annotated[str, text_rule()]
    pattern: Annotated[str, text_rule()]
    match_type: PatternMatchType
    confidence: Annotated[Optional[float], range_rule(ge=0.0, le=1.0)] = Field(
        default=None,
        description="Score for auto-categorization (0-1)"
    )

    @model_validator(mode='after')
    def validate_regex(self, info: ValidationInfo) -> 'CategoryPattern':
        if not is_loading(info) and self.match_type == PatternMatchType.REGEX:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{self.pattern}': {e}")
        return self

    def matches(self, text: str) -> bool:
        """
        Check a transaction description against this pattern (case-insensitive).

        A loaded regex that Python cannot compile never matches.
        """
        if self.match_type == PatternMatchType.REGEX:
            try:
                return re.search(self.pattern, text, re.IGNORECASE) is not None
            except re.error:
                return False
        return self.pattern.lower() in text.lower()
