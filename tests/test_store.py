"""Tests for the durable store backends."""

import json
from pathlib import Path

import pytest

from fgwork.config.models import StoreConfig
from fgwork.store import (
    FileStore,
    MemoryStore,
    NullStore,
    StoreError,
    StoreNotInitializedError,
    create_store,
)


class TestFileStore:
    async def _make_store(self, tmp_path: Path) -> FileStore:
        store = FileStore(tmp_path / "data" / "store.json")
        await store.init()
        return store

    async def test_write_and_read(self, tmp_path):
        store = await self._make_store(tmp_path)

        await store.write("q", '{"list": []}')

        assert await store.read("q") == '{"list": []}'

    async def test_read_missing(self, tmp_path):
        store = await self._make_store(tmp_path)

        assert await store.read("q") is None

    async def test_init_creates_parent_dir(self, tmp_path):
        store = await self._make_store(tmp_path)

        assert store.path.parent.is_dir()
        assert not store.path.exists()

    async def test_survives_new_instance(self, tmp_path):
        store = await self._make_store(tmp_path)
        await store.write("a", "1")
        await store.write("b", "2")

        reopened = await self._make_store(tmp_path)

        assert await reopened.read("a") == "1"
        assert sorted(await reopened.keys()) == ["a", "b"]

    async def test_overwrite(self, tmp_path):
        store = await self._make_store(tmp_path)
        await store.write("q", "old")
        await store.write("q", "new")

        assert await store.read("q") == "new"

    async def test_remove(self, tmp_path):
        store = await self._make_store(tmp_path)
        await store.write("a", "1")
        await store.write("b", "2")

        await store.remove("a")

        assert await store.read("a") is None
        assert await store.keys() == ["b"]

    async def test_remove_missing_is_noop(self, tmp_path):
        store = await self._make_store(tmp_path)

        await store.remove("nothing")

        assert await store.keys() == []

    async def test_file_is_plain_json(self, tmp_path):
        store = await self._make_store(tmp_path)
        await store.write("q", '{"list": []}')

        assert json.loads(store.path.read_text()) == {"q": '{"list": []}'}

    async def test_no_temp_files_left_behind(self, tmp_path):
        store = await self._make_store(tmp_path)
        await store.write("q", "x")

        leftovers = [p.name for p in store.path.parent.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    async def test_corrupt_file_raises(self, tmp_path):
        store = await self._make_store(tmp_path)
        store.path.write_text("not json {")

        with pytest.raises(StoreError):
            await store.read("q")
        with pytest.raises(StoreError):
            await store.write("q", "x")
        assert store.path.read_text() == "not json {"

    async def test_default_path_under_home(self, fgwork_home):
        store = FileStore()

        assert store.path == fgwork_home.resolve() / "store.json"

    async def test_requires_init(self, tmp_path):
        store = FileStore(tmp_path / "store.json")

        with pytest.raises(StoreNotInitializedError):
            await store.read("q")
        with pytest.raises(StoreNotInitializedError):
            await store.write("q", "x")


class TestMemoryStore:
    async def test_operations(self):
        store = MemoryStore()
        await store.init()

        await store.write("q", "x")
        assert await store.read("q") == "x"
        assert await store.keys() == ["q"]

        await store.remove("q")
        assert await store.read("q") is None

    async def test_seeded_data(self):
        store = MemoryStore({"q": "x"})
        await store.init()

        assert await store.read("q") == "x"

    async def test_requires_init(self):
        with pytest.raises(StoreNotInitializedError):
            await MemoryStore().keys()


class TestNullStore:
    async def test_drops_everything(self):
        store = NullStore()
        await store.init()

        await store.write("q", "x")

        assert await store.read("q") is None
        assert await store.keys() == []
        await store.remove("q")

    async def test_init_is_idempotent(self):
        store = NullStore()
        await store.init()
        await store.init()

        assert store.initialized is True


class TestCreateStore:
    def test_file_backend(self, tmp_path):
        store = create_store(StoreConfig(backend="file", path=tmp_path / "s.json"))

        assert isinstance(store, FileStore)
        assert store.path == tmp_path / "s.json"

    def test_memory_backend(self):
        assert isinstance(create_store(StoreConfig(backend="memory")), MemoryStore)

    def test_null_backend(self):
        assert isinstance(create_store(StoreConfig(backend="null")), NullStore)
