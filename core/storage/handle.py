"""
Shared, lock-guarded access to the active todo repository.

One RepositoryHandle is built at startup and injected into the API.
Reads (list, get) go through read(); mutations (create, update, delete)
go through write() and hold the lock for the whole backend call.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from core.locks import ReadWriteLock
from core.storage.base import BaseTodoRepository


class RepositoryHandle:
    """The single shared reference to the selected backend."""

    def __init__(self, repository: BaseTodoRepository):
        self._repository = repository
        self._lock = ReadWriteLock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    @asynccontextmanager
    async def read(self) -> AsyncGenerator[BaseTodoRepository, None]:
        """Shared access for read-only operations."""
        async with self._lock.read():
            yield self._repository

    @asynccontextmanager
    async def write(self) -> AsyncGenerator[BaseTodoRepository, None]:
        """Exclusive access for mutating operations."""
        async with self._lock.write():
            yield self._repository
