"""Services package."""

from finance_tracker.services.storage import (
    DocumentStoreInterface,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    PersistenceWriteError,
    StorageError,
)

__all__ = [
    "DocumentStoreInterface",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "PersistenceWriteError",
    "StorageError",
]
