"""Store event logging package."""

from finance_tracker.audit.events import StoreEvent, StoreEventSeverity, StoreEventType
from finance_tracker.audit.logger import StoreAuditLogger

__all__ = ["StoreAuditLogger", "StoreEvent", "StoreEventSeverity", "StoreEventType"]
