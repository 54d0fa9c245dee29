"""
Persisted Store Base

Every domain store (accounts, categories, transactions) owns one slice of
state and mirrors it to the document store under its own key.

Lifecycle:
1. Construction  → empty collections
2. hydrate()     → load snapshot, migrate if stale, then schedule seeding
                   on the next event-loop turn
3. Steady state  → actions mutate memory synchronously and schedule a
                   background write of the whole slice

Snapshot format (JSON):
    {"state": {<collections, camelCase>}, "version": <int>}

DESIGN DECISION: A failed write never rolls back memory. The in-memory slice
stays authoritative until the next successful write or a restart.
Writes are retried with exponential back-off and then logged.
"""

import asyncio
import json
from abc import ABC
from collections.abc import Mapping
from typing import Any, Callable, ClassVar, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.audit import StoreAuditLogger, StoreEventType
from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.models.base import LOADING_CONTEXT, RecordModel, generate_id
from finance_tracker.services.storage import (
    DocumentStoreInterface,
    PersistenceWriteError,
    StorageError,
)


CURRENT_SCHEMA_VERSION = 2

MigrationStep = Callable[[dict[str, Any]], dict[str, Any]]
SeedFactory = Callable[[], list]

StateT = TypeVar("StateT", bound=RecordModel)
RecordT = TypeVar("RecordT", bound=RecordModel)


class SnapshotEnvelope(BaseModel):
    """Outer shape of a persisted snapshot."""

    state: Any = None
    version: int = Field(ge=0)


def migrate_state(
    state: dict[str, Any],
    version: int,
    steps: Sequence[tuple[int, MigrationStep]],
) -> tuple[dict[str, Any], int]:
    """
    Bring a raw persisted state up to date.

    Each step is (target_version, fn). Steps whose target is above the
    stored version run in ascending order; each receives the output of
    the previous one.

    Returns:
        (migrated_state, resulting_version)
    """
    for target_version, step in sorted(steps, key=lambda s: s[0]):
        if version < target_version:
            state = step(state)
            version = target_version
    return state, version


def record_payload(data: Any) -> dict[str, Any]:
    """Turn caller input (model or mapping) into field data without an id."""
    if isinstance(data, BaseModel):
        payload = data.model_dump()
    elif isinstance(data, Mapping):
        payload = dict(data)
    else:
        raise TypeError(f"Expected a mapping or model, got {type(data).__name__}")
    payload.pop("id", None)
    return payload


class PersistedStore(ABC, Generic[StateT]):
    """
    Base class for a store slice backed by the document store.

    Subclasses declare:
        storage_key     - document key, unique per store
        state_model     - pydantic model of the slice
        seed_factories  - collection name → seed function
    """

    storage_key: ClassVar[str]
    state_model: ClassVar[type[RecordModel]]
    seed_factories: ClassVar[dict[str, SeedFactory]] = {}
    version: ClassVar[int] = CURRENT_SCHEMA_VERSION

    def __init__(
        self,
        document_store: DocumentStoreInterface,
        settings: Optional[StorageSettings] = None,
        audit_logger: Optional[StoreAuditLogger] = None,
    ):
        self._document_store = document_store
        self._settings = settings or get_settings().storage
        self._audit = audit_logger or StoreAuditLogger()

        self._state: StateT = self.state_model()
        self._hydrated = False
        self._seed_handle: Optional[asyncio.Handle] = None
        self._loaded_collections: set[str] = set()
        self._pending_writes: set[asyncio.Task] = set()
        self._write_lock: Optional[asyncio.Lock] = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> StateT:
        """A deep copy of the current slice."""
        return self._state.model_copy(deep=True)

    @property
    def has_hydrated(self) -> bool:
        return self._hydrated

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._pending_writes)

    def serialize(self) -> str:
        """Serialize the whole slice in the persisted snapshot format."""
        return json.dumps(
            {"state": self._state.to_document(), "version": self.version},
            ensure_ascii=False,
        )

    # ------------------------------------------------------------------
    # Migration and seeding
    # ------------------------------------------------------------------

    def migrations(self) -> list[tuple[int, MigrationStep]]:
        """
        Ordered migration steps.

        Snapshots older than v2 are replaced wholesale with the seed data;
        their records are not carried over.
        """
        return [(2, self._reset_to_seed)]

    def _reset_to_seed(self, _state: dict[str, Any]) -> dict[str, Any]:
        return {
            name: [record.to_document() for record in factory()]
            for name, factory in self.seed_factories.items()
        }

    def _seed_empty_collections(self) -> list[str]:
        """
        Replace only the empty collections with seed data.

        A collection that held records on disk is never seeded, even if
        every one of its records had to be dropped while loading.
        """
        seeded = []
        for name, factory in self.seed_factories.items():
            if name in self._loaded_collections:
                continue
            if not getattr(self._state, name):
                setattr(self._state, name, factory())
                seeded.append(name)
        return seeded

    def _run_seed(self) -> None:
        self._seed_handle = None
        seeded = self._seed_empty_collections()
        if seeded:
            self._audit.log_seeded(self.storage_key, seeded)
            self._schedule_persist()

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    async def hydrate(self) -> None:
        """
        Load the persisted snapshot into memory.

        Safe to call more than once; only the first call loads.
        Seeding of empty collections is deferred to the next loop turn, so
        the hydrated state is observable before seeding replaces it.
        """
        if self._hydrated:
            return

        try:
            blob = await self._document_store.get(self.storage_key)
        except StorageError as e:
            self._audit.log_hydration_failed(self.storage_key, str(e))
            blob = None

        state, stored_version, migrated = self._load(blob)
        self._state = state
        self._hydrated = True

        self._audit.log_hydrated(self.storage_key, stored_version, self._counts())
        if migrated:
            self._audit.log_migrated(self.storage_key, stored_version, self.version)
            self._schedule_persist()

        loop = asyncio.get_running_loop()
        self._seed_handle = loop.call_soon(self._run_seed)

    async def wait_until_settled(self) -> None:
        """Hydrate if needed, let deferred seeding run, and wait for writes."""
        await self.hydrate()
        while self._seed_handle is not None:
            await asyncio.sleep(0)
        await self.flush()

    def _load(self, blob: Optional[str]) -> tuple[StateT, Optional[int], bool]:
        """
        Parse a snapshot blob.

        Returns:
            (state, stored_version, was_migrated)

        A blob that is not a snapshot at all (bad JSON, wrong envelope or
        state shape) is logged and treated as absent. Records are validated
        with LOADING_CONTEXT, so write-only rules do not reject them.
        """
        if blob is None:
            return self.state_model(), None, False

        try:
            envelope = SnapshotEnvelope.model_validate_json(blob)
        except ValidationError as e:
            self._audit.log_hydration_failed(self.storage_key, str(e))
            return self.state_model(), None, False

        if envelope.version > self.version:
            self._audit.log_version_ahead(self.storage_key, envelope.version, self.version)

        raw_state, new_version = migrate_state(
            envelope.state, envelope.version, self.migrations()
        )

        state = self._validate_loaded_state(raw_state)
        if state is None:
            return self.state_model(), None, False
        return state, envelope.version, new_version != envelope.version

    def _validate_loaded_state(self, raw_state: Any) -> Optional[StateT]:
        """
        Validate a loaded state, dropping only the parts that cannot load.

        A failing record is removed from its collection; a failing
        non-collection field (the transactions filter) falls back to its
        default. Each drop is logged with the dropped document. Returns None
        when the state is not an object or a failure cannot be located.
        """
        if not isinstance(raw_state, dict):
            self._audit.log_hydration_failed(
                self.storage_key, f"Snapshot state is {type(raw_state).__name__}, not an object"
            )
            return None

        self._loaded_collections = {
            name for name in self.seed_factories if raw_state.get(name)
        }

        while True:
            try:
                return self.state_model.model_validate(raw_state, context=LOADING_CONTEXT)
            except ValidationError as e:
                invalid = self._invalid_parts(raw_state, e)
                if not invalid:
                    self._audit.log_hydration_failed(self.storage_key, str(e))
                    return None

            # Highest index first so earlier indexes stay valid
            for (field, index), messages in sorted(
                invalid.items(), key=lambda item: (item[0][0], item[0][1] or 0), reverse=True
            ):
                if index is None:
                    dropped = raw_state.pop(field)
                else:
                    dropped = raw_state[field].pop(index)
                self._audit.log_record_dropped(
                    self.storage_key, field, dropped, "; ".join(messages)
                )

    @staticmethod
    def _invalid_parts(
        raw_state: dict[str, Any], error: ValidationError
    ) -> dict[tuple[str, Optional[int]], list[str]]:
        """
        Locate what failed: (collection, index) for a record inside a list,
        (field, None) for a whole top-level field.
        """
        invalid: dict[tuple[str, Optional[int]], list[str]] = {}
        for detail in error.errors():
            loc = detail["loc"]
            if not loc or loc[0] not in raw_state:
                return {}
            field = loc[0]
            if (
                len(loc) >= 2
                and isinstance(loc[1], int)
                and isinstance(raw_state.get(field), list)
            ):
                key = (field, loc[1])
                where = ".".join(str(part) for part in loc[2:]) or "record"
            else:
                key = (field, None)
                where = ".".join(str(part) for part in loc[1:]) or field
            invalid.setdefault(key, []).append(f"{where}: {detail['msg']}")
        return invalid

    def _counts(self) -> dict[str, int]:
        return {
            name: len(getattr(self._state, name))
            for name in self.seed_factories
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _schedule_persist(self) -> None:
        """Write the slice in the background (synchronously if no loop runs)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._write_snapshot())
            return

        task = loop.create_task(self._persist())
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist(self) -> bool:
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        async with self._write_lock:
            return await self._write_snapshot()

    async def _write_snapshot(self) -> bool:
        """Serialize the latest state and write it, retrying on failure."""
        blob = self.serialize()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.write_retry_attempts),
            wait=wait_exponential(
                multiplier=self._settings.write_retry_multiplier,
                min=self._settings.write_retry_min_wait,
                max=self._settings.write_retry_max_wait,
            ),
            retry=retry_if_exception_type(StorageError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    written = await self._document_store.set(self.storage_key, blob)
                    if not written:
                        raise PersistenceWriteError(
                            f"Document store rejected write for {self.storage_key}"
                        )
        except StorageError as e:
            self._audit.log_persist_failed(
                self.storage_key, str(e), self._settings.write_retry_attempts
            )
            return False

        self._audit.log_persisted(self.storage_key, self.version, len(blob))
        return True

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    async def reset(self) -> None:
        """Drop the persisted snapshot and empty the in-memory slice."""
        await self.flush()
        try:
            await self._document_store.remove(self.storage_key)
        except StorageError as e:
            self._audit.log_persist_failed(self.storage_key, str(e), attempts=1)
        self._state = self.state_model()
        self._loaded_collections = set()

    # ------------------------------------------------------------------
    # Record helpers for subclasses
    # ------------------------------------------------------------------

    def _commit(
        self,
        event_type: StoreEventType,
        entity_type: str,
        entity_id: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self._audit.log_mutation(event_type, self.storage_key, entity_type, entity_id, details)
        self._schedule_persist()

    def _add_record(
        self,
        collection: str,
        entity_type: str,
        validate: Callable[[dict[str, Any]], RecordT],
        data: Any,
        check: Optional[Callable[[RecordT], None]] = None,
    ) -> RecordT:
        """Validate caller data with a fresh id and append it to a collection."""
        record = validate({**record_payload(data), "id": generate_id()})
        if check:
            check(record)
        getattr(self._state, collection).append(record)
        self._commit(StoreEventType.RECORD_ADDED, entity_type, record.id)
        return record

    def _update_record(
        self,
        collection: str,
        entity_type: str,
        validate: Callable[[dict[str, Any]], RecordT],
        allowed_fields: set[str],
        record_id: str,
        updates: Mapping[str, Any],
        check: Optional[Callable[[RecordT], None]] = None,
    ) -> Optional[RecordT]:
        """
        Merge fields into the record with this id.

        Returns None (no-op) when the id is absent. An invalid merged
        record raises ValueError and leaves the collection untouched.
        """
        unknown = set(updates) - (allowed_fields - {"id"})
        if unknown:
            raise ValueError(f"Unknown {entity_type} fields: {sorted(unknown)}")

        records = getattr(self._state, collection)
        for index, record in enumerate(records):
            if record.id != record_id:
                continue
            merged = {**record.model_dump(), **updates, "id": record_id}
            updated = validate(merged)
            if check:
                check(updated)
            records[index] = updated
            self._commit(
                StoreEventType.RECORD_UPDATED,
                entity_type,
                record_id,
                {"fields": sorted(updates)},
            )
            return updated
        return None

    def _delete_record(self, collection: str, entity_type: str, record_id: str) -> bool:
        """Remove the record with this id. Returns False (no-op) when absent."""
        records = getattr(self._state, collection)
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        setattr(self._state, collection, remaining)
        self._commit(StoreEventType.RECORD_DELETED, entity_type, record_id)
        return True

    @staticmethod
    def _find(records: list[RecordT], record_id: str) -> Optional[RecordT]:
        return next((record for record in records if record.id == record_id), None)
