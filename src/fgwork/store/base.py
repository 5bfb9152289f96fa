"""Durable store contract."""

from abc import ABC, abstractmethod


class StoreError(Exception):
    """Base exception for store failures."""


class StoreNotInitializedError(StoreError):
    """Raised when the store is used before init() completed."""

    def __init__(self, name: str):
        super().__init__(f"{name} used before init()")


class Store(ABC):
    """Opaque key -> string storage.

    Writes to a single key are durable and atomic by the time the call
    returns. Nothing is promised about ordering across keys.
    """

    name = "store"

    def __init__(self) -> None:
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        """Prepare the backend. Safe to call more than once."""
        if self._initialized:
            return
        await self._open()
        self._initialized = True

    async def read(self, key: str) -> str | None:
        self._check_initialized()
        return await self._read(key)

    async def write(self, key: str, value: str) -> None:
        self._check_initialized()
        await self._write(key, value)

    async def remove(self, key: str) -> None:
        """Delete a key. Removing a missing key is a no-op."""
        self._check_initialized()
        await self._remove(key)

    async def keys(self) -> list[str]:
        self._check_initialized()
        return await self._keys()

    def _check_initialized(self) -> None:
        if not self._initialized:
            raise StoreNotInitializedError(self.name)

    async def _open(self) -> None:
        pass

    @abstractmethod
    async def _read(self, key: str) -> str | None: ...

    @abstractmethod
    async def _write(self, key: str, value: str) -> None: ...

    @abstractmethod
    async def _remove(self, key: str) -> None: ...

    @abstractmethod
    async def _keys(self) -> list[str]: ...
