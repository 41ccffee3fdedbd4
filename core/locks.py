"""
Asyncio reader/writer lock.

Readers share the lock; a writer holds it alone. Waiting writers take
priority over newly arriving readers so a stream of reads cannot starve
a write.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock for coroutines.

    Usage:
        lock = ReadWriteLock()
        async with lock.read():
            ...
        async with lock.write():
            ...
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._pending_writers = 0

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        return self._readers

    @property
    def writing(self) -> bool:
        """Whether a writer currently holds the lock."""
        return self._writer

    async def _notify_all(self) -> None:
        async with self._cond:
            self._cond.notify_all()

    @asynccontextmanager
    async def read(self) -> AsyncGenerator[None, None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and not self._pending_writers
            )
            self._readers += 1
        try:
            yield
        finally:
            # Counters change before any await; the shielded wake-up outlives cancellation
            self._readers -= 1
            if self._readers == 0:
                await asyncio.shield(self._notify_all())

    @asynccontextmanager
    async def write(self) -> AsyncGenerator[None, None]:
        async with self._cond:
            self._pending_writers += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            except BaseException:
                # Cancelled while queued: let blocked readers re-check
                self._pending_writers -= 1
                self._cond.notify_all()
                raise
            self._pending_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            self._writer = False
            await asyncio.shield(self._notify_all())
