"""
In-memory document store.

Nothing survives the process. Used by tests and by the "memory" backend
setting for throwaway sessions.
"""

from typing import Optional

from finance_tracker.services.storage.interface import DocumentStoreInterface


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dict-backed implementation of the document store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._documents: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    async def set(self, key: str, blob: str) -> bool:
        self._documents[key] = blob
        return True

    async def remove(self, key: str) -> bool:
        return self._documents.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._documents)
