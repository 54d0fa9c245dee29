"""Referential integrity validation package."""

from finance_tracker.validation.integrity import (
    IntegrityIssue,
    Reference,
    ReferenceChecker,
)

__all__ = ["IntegrityIssue", "Reference", "ReferenceChecker"]
