"""
Abstract Document Store Interface

DESIGN DECISION: Stores never touch a storage backend directly.
They go through this key/value contract, which allows us to:
1. Swap the JSON file backend for another durable store
2. Use in-memory storage for testing
3. Keep store logic decoupled from storage implementation

The contract is intentionally tiny: get/set/remove of serialized blobs.
A missing key is a normal outcome, never an error.
"""

from abc import ABC, abstractmethod
from typing import Optional


class DocumentStoreInterface(ABC):
    """
    Abstract interface for a durable key/value document store.

    All store slices share one instance but use disjoint keys.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: The document key

        Returns:
            The serialized blob, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, blob: str) -> bool:
        """
        Store a blob under a key, replacing any previous value.

        Returns:
            True if written successfully, False if the backend rejected it

        Raises:
            StorageError: If the backend fails unexpectedly
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if a value was removed, False if the key was absent
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceWriteError(StorageError):
    """The backend refused a snapshot write (quota, I/O...)."""
    pass
