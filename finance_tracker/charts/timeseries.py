"""
Time-series normalization for the chart widget.

The chart accepts numeric timestamps or day-level date strings. Monthly
aggregates are keyed "YYYY-MM", so those are pinned to the first of the
month. Nothing else is coerced, and points are never re-ordered.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Union

from pydantic import BaseModel

_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")

TimeValue = Union[int, float, str]


class TimePoint(BaseModel):
    """A single chart point."""

    time: TimeValue
    value: float


def normalize_time(time: TimeValue) -> TimeValue:
    """Turn "YYYY-MM" into "YYYY-MM-01"; leave everything else as is."""
    if isinstance(time, str) and _YEAR_MONTH.match(time):
        return f"{time}-01"
    return time


def normalize_point(point: Union[TimePoint, Mapping[str, Any]]) -> TimePoint:
    if not isinstance(point, TimePoint):
        point = TimePoint.model_validate(point)
    return TimePoint(time=normalize_time(point.time), value=point.value)


def normalize_points(points: Iterable[Union[TimePoint, Mapping[str, Any]]]) -> list[TimePoint]:
    """Normalize a series, keeping the caller's order."""
    return [normalize_point(point) for point in points]
