"""JSON file store.

All keys live in one JSON document (``$FGWORK_HOME/store.json`` by default).
Every write rewrites the document atomically via tempfile + fsync +
os.replace(), under a FileLock so separate processes sharing the file
don't interleave read-modify-write cycles.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from filelock import FileLock

from fgwork.config.paths import get_store_path
from fgwork.store.base import Store, StoreError

logger = logging.getLogger(__name__)


class FileStore(Store):
    """Key -> string store persisted as a single JSON object on disk."""

    name = "file"

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path or get_store_path()
        self._lock = FileLock(str(self._path) + ".lock")

    @property
    def path(self) -> Path:
        return self._path

    async def _open(self) -> None:
        await asyncio.to_thread(self._path.parent.mkdir, parents=True, exist_ok=True)
        logger.debug("file_store_opened", extra={"file.path": str(self._path)})

    async def _read(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._locked_read)
        return data.get(key)

    async def _write(self, key: str, value: str) -> None:
        def mutate(data: dict[str, str]) -> None:
            data[key] = value

        await asyncio.to_thread(self._locked_mutate, mutate)

    async def _remove(self, key: str) -> None:
        def mutate(data: dict[str, str]) -> None:
            data.pop(key, None)

        await asyncio.to_thread(self._locked_mutate, mutate)

    async def _keys(self) -> list[str]:
        data = await asyncio.to_thread(self._locked_read)
        return list(data)

    # ------------------------------------------------------------------
    # Blocking helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _locked_read(self) -> dict[str, str]:
        with self._lock:
            return self._read_all()

    def _locked_mutate(self, mutate) -> None:
        with self._lock:
            data = self._read_all()
            mutate(data)
            self._write_all(data)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text())
        except json.JSONDecodeError as e:
            # Rewriting a document we can't parse would drop every other key
            raise StoreError(f"Corrupt store file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Corrupt store file {self._path}: expected an object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(json.dumps(data, indent=2))
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            Path(tmp).replace(self._path)
        except BaseException:
            try:
                Path(tmp).unlink()
            except OSError:
                pass
            raise
