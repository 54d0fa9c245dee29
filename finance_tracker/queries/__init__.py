"""Report queries package."""

from finance_tracker.queries.reports import ReportBuilder, ReportError

__all__ = ["ReportBuilder", "ReportError"]
