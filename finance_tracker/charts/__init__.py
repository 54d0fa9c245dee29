"""Chart input helpers."""

from finance_tracker.charts.timeseries import (
    TimePoint,
    normalize_point,
    normalize_points,
    normalize_time,
)

__all__ = ["TimePoint", "normalize_point", "normalize_points", "normalize_time"]
