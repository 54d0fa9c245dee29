"""
Store Event Models

Every hydration, migration, seeding, mutation and snapshot write of a
store is described by a StoreEvent. Events are logged locally and kept in
a bounded in-memory history for inspection.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class StoreEventType(str, Enum):
    """Types of store events."""
    # Loading
    HYDRATED = "hydrated"
    HYDRATION_FAILED = "hydration_failed"
    RECORD_DROPPED = "record_dropped"
    MIGRATED = "migrated"
    SEEDED = "seeded"

    # Mutations
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    FILTERS_CHANGED = "filters_changed"

    # Persistence
    SNAPSHOT_PERSISTED = "snapshot_persisted"
    PERSIST_FAILED = "persist_failed"


class StoreEventSeverity(str, Enum):
    """Severity level for store events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StoreEvent(BaseModel):
    """A single store event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: StoreEventType
    severity: StoreEventSeverity = StoreEventSeverity.INFO

    store: str = Field(
        ...,
        description="Storage key of the store slice (e.g. 'transactions-store')"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Record type (e.g. 'transaction', 'account')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to a flat dict for structured logging."""
        log_dict = {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "store": self.store,
            "description": self.description,
        }
        if self.entity_type:
            log_dict["entity_type"] = self.entity_type
        if self.entity_id:
            log_dict["entity_id"] = self.entity_id
        if self.details:
            log_dict["details"] = self.details
        if self.error_message:
            log_dict["error_message"] = self.error_message
        return log_dict
