"""
Store Audit Logger

Every store lifecycle step is logged through structlog and remembered in a
bounded history. Logging never raises into the store: a broken log sink
must not break a mutation.
"""

from collections import deque
from typing import Any, Optional

import structlog

from finance_tracker.audit.events import StoreEvent, StoreEventSeverity, StoreEventType


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class StoreAuditLogger:
    """
    Central logging service for store events.

    Logs events to the structured local log and keeps the most recent
    ones in memory (newest last).
    """

    def __init__(self, history_size: int = 500):
        self._history: deque[StoreEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("finance_tracker.stores")

    def log(self, event: StoreEvent) -> None:
        """Log a store event."""
        self._history.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity == StoreEventSeverity.ERROR:
                self._logger.error("store_event", **log_dict)
            elif event.severity == StoreEventSeverity.WARNING:
                self._logger.warning("store_event", **log_dict)
            elif event.severity == StoreEventSeverity.DEBUG:
                self._logger.debug("store_event", **log_dict)
            else:
                self._logger.info("store_event", **log_dict)
        except Exception as e:
            # Keep the event in history even if the sink is broken
            self._history.append(
                StoreEvent(
                    event_type=event.event_type,
                    severity=StoreEventSeverity.ERROR,
                    store=event.store,
                    description="Failed to write store event to log",
                    error_message=str(e),
                )
            )

    def recent_events(
        self,
        limit: int = 100,
        store: Optional[str] = None,
        event_type: Optional[StoreEventType] = None,
    ) -> list[StoreEvent]:
        """Get the most recent events (newest first), optionally filtered."""
        events = [
            event
            for event in reversed(self._history)
            if (store is None or event.store == store)
            and (event_type is None or event.event_type == event_type)
        ]
        return events[:limit]

    def clear(self) -> None:
        self._history.clear()

    # ------------------------------------------------------------------
    # Convenience builders
    # ------------------------------------------------------------------

    def log_hydrated(self, store: str, version: Optional[int], counts: dict[str, int]) -> None:
        """Log a completed hydration."""
        self.log(
            StoreEvent(
                event_type=StoreEventType.HYDRATED,
                store=store,
                description="Snapshot loaded" if version is not None else "No snapshot found",
                details={"version": version, "counts": counts},
            )
        )

    def log_hydration_failed(self, store: str, error_message: str) -> None:
        """Log an unreadable snapshot. The store falls back to empty state."""
        self.log(
            StoreEvent(
                event_type=StoreEventType.HYDRATION_FAILED,
                severity=StoreEventSeverity.WARNING,
                store=store,
                description="Stored snapshot could not be parsed; treating as absent",
                error_message=error_message,
            )
        )

    def log_record_dropped(
        self,
        store: str,
        collection: str,
        document: Any,
        error_message: str,
    ) -> None:
        """Log a stored record that could not be loaded. The rest of the slice loads."""
        record_id = document.get("id") if isinstance(document, dict) else None
        self.log(
            StoreEvent(
                event_type=StoreEventType.RECORD_DROPPED,
                severity=StoreEventSeverity.WARNING,
                store=store,
                entity_type=collection,
                entity_id=str(record_id) if record_id is not None else None,
                description=f"Unreadable {collection} entry dropped while loading",
                details={"document": document},
                error_message=error_message,
            )
        )

    def log_version_ahead(self, store: str, stored_version: int, current_version: int) -> None:
        """Log a snapshot written by a newer schema. It is loaded as-is."""
        self.log(
            StoreEvent(
                event_type=StoreEventType.HYDRATED,
                severity=StoreEventSeverity.WARNING,
                store=store,
                description=f"Snapshot v{stored_version} is newer than v{current_version}; loading as-is",
                details={"stored_version": stored_version, "current_version": current_version},
            )
        )

    def log_migrated(self, store: str, from_version: int, to_version: int) -> None:
        self.log(
            StoreEvent(
                event_type=StoreEventType.MIGRATED,
                severity=StoreEventSeverity.WARNING,
                store=store,
                description=f"Snapshot migrated from v{from_version} to v{to_version}",
                details={"from_version": from_version, "to_version": to_version},
            )
        )

    def log_seeded(self, store: str, collections: list[str]) -> None:
        self.log(
            StoreEvent(
                event_type=StoreEventType.SEEDED,
                store=store,
                description="Empty collections populated with seed data",
                details={"collections": collections},
            )
        )

    def log_mutation(
        self,
        event_type: StoreEventType,
        store: str,
        entity_type: str,
        entity_id: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log an add/update/delete of a single record."""
        self.log(
            StoreEvent(
                event_type=event_type,
                severity=StoreEventSeverity.DEBUG,
                store=store,
                entity_type=entity_type,
                entity_id=entity_id,
                description=f"{entity_type} {event_type.value.replace('record_', '')}",
                details=details or {},
            )
        )

    def log_persisted(self, store: str, version: int, size_bytes: int) -> None:
        self.log(
            StoreEvent(
                event_type=StoreEventType.SNAPSHOT_PERSISTED,
                severity=StoreEventSeverity.DEBUG,
                store=store,
                description="Snapshot written",
                details={"version": version, "size_bytes": size_bytes},
            )
        )

    def log_persist_failed(self, store: str, error_message: str, attempts: int) -> None:
        """Log a write that failed after all retries. In-memory state is kept."""
        self.log(
            StoreEvent(
                event_type=StoreEventType.PERSIST_FAILED,
                severity=StoreEventSeverity.ERROR,
                store=store,
                description="Snapshot write failed; in-memory state is ahead of storage",
                error_message=error_message,
                details={"attempts": attempts},
            )
        )
