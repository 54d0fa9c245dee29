"""
Shared base for persisted records.

Records use snake_case attributes in Python and camelCase keys in the
persisted snapshot, so documents written by earlier clients load unchanged.

DESIGN DECISION: Content rules (non-empty text, length limits, value
ranges, cross-field checks) guard new writes only. Snapshots are validated
with LOADING_CONTEXT, which skips them: a record that earlier clients were
allowed to save must keep loading. Types and structure are checked always.
"""

from decimal import Decimal
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationInfo
from pydantic.alias_generators import to_camel


LOADING_CONTEXT = {"loading": True}


def generate_id() -> str:
    """Create a fresh globally-unique record id."""
    return str(uuid4())


def is_loading(info: ValidationInfo) -> bool:
    """True when a persisted snapshot is being validated."""
    return bool(info.context and info.context.get("loading"))


def write_rule(check: Callable[[Any], None]) -> AfterValidator:
    """Wrap a check so it runs for new writes and is skipped while loading."""
    def validate(value: Any, info: ValidationInfo) -> Any:
        if value is not None and not is_loading(info):
            check(value)
        return value
    return AfterValidator(validate)


def text_rule(min_length: int = 1, max_length: Optional[int] = None) -> AfterValidator:
    """Non-blank text with an optional length limit. The text is kept as entered."""
    def check(value: str) -> None:
        if len(value.strip()) < min_length:
            if min_length == 1:
                raise ValueError("must not be empty")
            raise ValueError(f"must have at least {min_length} characters")
        if max_length is not None and len(value) > max_length:
            raise ValueError(f"must have at most {max_length} characters")
    return write_rule(check)


def range_rule(
    ge: Optional[Union[int, float, Decimal]] = None,
    le: Optional[Union[int, float, Decimal]] = None,
) -> AfterValidator:
    def check(value: Any) -> None:
        if ge is not None and value < ge:
            raise ValueError(f"must be greater than or equal to {ge}")
        if le is not None and value > le:
            raise ValueError(f"must be less than or equal to {le}")
    return write_rule(check)


class RecordModel(BaseModel):
    """Base model for every record that lives in a store slice."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON-safe, camelCase form used on disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
