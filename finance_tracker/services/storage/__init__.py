"""
Storage Services Package

Provides the abstract document store interface and concrete implementations.
The JSON file backend is the durable default, designed to be swappable.
"""

from finance_tracker.services.storage.interface import (
    DocumentStoreInterface,
    PersistenceWriteError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileDocumentStore
from finance_tracker.services.storage.memory import InMemoryDocumentStore

__all__ = [
    # Interface
    "DocumentStoreInterface",
    # Exceptions
    "PersistenceWriteError",
    "StorageError",
    # Implementations
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
]
