"""Tests for the document store implementations."""

import pytest

from finance_tracker.services.storage import (
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    StorageError,
)


class TestInMemoryDocumentStore:
    """Tests for the dict-backed store."""

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self):
        store = InMemoryDocumentStore()
        assert await store.get("accounts-store") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self):
        store = InMemoryDocumentStore()
        assert await store.set("accounts-store", '{"version": 2}') is True
        assert await store.get("accounts-store") == '{"version": 2}'

    @pytest.mark.asyncio
    async def test_remove(self):
        store = InMemoryDocumentStore({"k": "v"})
        assert await store.remove("k") is True
        assert await store.remove("k") is False
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        store = InMemoryDocumentStore()
        await store.set("accounts-store", "a")
        await store.set("transactions-store", "t")
        assert store.keys() == ["accounts-store", "transactions-store"]
        assert await store.get("accounts-store") == "a"


class TestJsonFileDocumentStore:
    """Tests for the file-per-key store."""

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        assert await store.get("categories-store") is None

    @pytest.mark.asyncio
    async def test_set_creates_directory_and_file(self, tmp_path):
        data_dir = tmp_path / "nested" / "data"
        store = JsonFileDocumentStore(data_dir)
        assert await store.set("categories-store", '{"state": {}, "version": 2}') is True
        assert (data_dir / "categories-store.json").read_text(encoding="utf-8") == (
            '{"state": {}, "version": 2}'
        )
        assert await store.get("categories-store") == '{"state": {}, "version": 2}'

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        await store.set("transactions-store", "first")
        await store.set("transactions-store", "second")
        assert await store.get("transactions-store") == "second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["transactions-store.json"]

    @pytest.mark.asyncio
    async def test_remove_missing_key(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        assert await store.remove("accounts-store") is False
        await store.set("accounts-store", "x")
        assert await store.remove("accounts-store") is True
        assert await store.get("accounts-store") is None

    @pytest.mark.asyncio
    async def test_unicode_round_trip(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        await store.set("accounts-store", '{"symbol": "€"}')
        assert await store.get("accounts-store") == '{"symbol": "€"}'

    @pytest.mark.asyncio
    async def test_rejects_path_like_keys(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        with pytest.raises(StorageError, match="Invalid document key"):
            await store.get("../escape")

    @pytest.mark.asyncio
    async def test_unreadable_path_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileDocumentStore(blocker)
        with pytest.raises(StorageError):
            await store.set("accounts-store", "x")
