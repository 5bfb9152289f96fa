"""In-process store backends."""

from fgwork.store.base import Store


class MemoryStore(Store):
    """Dict-backed store. Contents vanish with the process."""

    name = "memory"

    def __init__(self, data: dict[str, str] | None = None) -> None:
        super().__init__()
        self._data: dict[str, str] = dict(data or {})

    async def _read(self, key: str) -> str | None:
        return self._data.get(key)

    async def _write(self, key: str, value: str) -> None:
        self._data[key] = value

    async def _remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def _keys(self) -> list[str]:
        return list(self._data)


class NullStore(Store):
    """Bypass mode for running without a backing store.

    Every write is dropped and every read reports a missing key, so
    open_queue always starts from an empty queue.
    """

    name = "null"

    async def _read(self, key: str) -> str | None:
        return None

    async def _write(self, key: str, value: str) -> None:
        return None

    async def _remove(self, key: str) -> None:
        return None

    async def _keys(self) -> list[str]:
        return []
