"""
Tests for ReadWriteLock and RepositoryHandle.

Readers share the lock, a writer excludes everyone else.
"""

import asyncio

import pytest

from core.locks import ReadWriteLock


async def _hold(context, entered: asyncio.Event, release: asyncio.Event):
    async with context:
        entered.set()
        await release.wait()


@pytest.mark.asyncio
async def test_concurrent_reads_do_not_block_each_other():
    lock = ReadWriteLock()
    release = asyncio.Event()
    first, second = asyncio.Event(), asyncio.Event()

    tasks = [
        asyncio.create_task(_hold(lock.read(), first, release)),
        asyncio.create_task(_hold(lock.read(), second, release)),
    ]

    await asyncio.wait_for(first.wait(), timeout=1)
    await asyncio.wait_for(second.wait(), timeout=1)
    assert lock.readers == 2

    release.set()
    await asyncio.gather(*tasks)
    assert lock.readers == 0


@pytest.mark.asyncio
async def test_write_blocks_reads_and_writes():
    lock = ReadWriteLock()
    release = asyncio.Event()
    writer_in = asyncio.Event()
    reader_in, other_writer_in = asyncio.Event(), asyncio.Event()

    writer = asyncio.create_task(_hold(lock.write(), writer_in, release))
    await asyncio.wait_for(writer_in.wait(), timeout=1)

    reader = asyncio.create_task(_hold(lock.read(), reader_in, asyncio.Event()))
    other_writer = asyncio.create_task(
        _hold(lock.write(), other_writer_in, asyncio.Event())
    )
    await asyncio.sleep(0.05)

    assert lock.writing
    assert not reader_in.is_set()
    assert not other_writer_in.is_set()

    release.set()
    await writer

    # Exactly one of the waiters gets in next; the other stays blocked
    done, pending = await asyncio.wait(
        [
            asyncio.create_task(reader_in.wait()),
            asyncio.create_task(other_writer_in.wait()),
        ],
        timeout=1,
        return_when=asyncio.FIRST_COMPLETED,
    )
    assert len(done) == 1
    for task in (reader, other_writer, *pending):
        task.cancel()
    await asyncio.gather(reader, other_writer, *pending, return_exceptions=True)


@pytest.mark.asyncio
async def test_write_waits_for_active_readers():
    lock = ReadWriteLock()
    release_reader = asyncio.Event()
    reader_in, writer_in = asyncio.Event(), asyncio.Event()

    reader = asyncio.create_task(_hold(lock.read(), reader_in, release_reader))
    await asyncio.wait_for(reader_in.wait(), timeout=1)

    writer = asyncio.create_task(_hold(lock.write(), writer_in, asyncio.Event()))
    await asyncio.sleep(0.05)
    assert not writer_in.is_set()

    release_reader.set()
    await reader
    await asyncio.wait_for(writer_in.wait(), timeout=1)

    writer.cancel()
    await asyncio.gather(writer, return_exceptions=True)
    assert not lock.writing


@pytest.mark.asyncio
async def test_pending_writer_holds_back_new_readers():
    lock = ReadWriteLock()
    release_reader = asyncio.Event()
    first_in, writer_in, late_in = asyncio.Event(), asyncio.Event(), asyncio.Event()
    release_writer = asyncio.Event()

    first = asyncio.create_task(_hold(lock.read(), first_in, release_reader))
    await asyncio.wait_for(first_in.wait(), timeout=1)

    writer = asyncio.create_task(_hold(lock.write(), writer_in, release_writer))
    await asyncio.sleep(0.01)
    late = asyncio.create_task(_hold(lock.read(), late_in, asyncio.Event()))
    await asyncio.sleep(0.05)

    assert not late_in.is_set()

    release_reader.set()
    await asyncio.wait_for(writer_in.wait(), timeout=1)
    assert not late_in.is_set()

    release_writer.set()
    await writer
    await asyncio.wait_for(late_in.wait(), timeout=1)

    late.cancel()
    await asyncio.gather(first, late, return_exceptions=True)


@pytest.mark.asyncio
async def test_cancelled_writer_releases_waiting_readers():
    lock = ReadWriteLock()
    release_reader = asyncio.Event()
    first_in, late_in = asyncio.Event(), asyncio.Event()

    first = asyncio.create_task(_hold(lock.read(), first_in, release_reader))
    await asyncio.wait_for(first_in.wait(), timeout=1)

    writer = asyncio.create_task(_hold(lock.write(), asyncio.Event(), asyncio.Event()))
    await asyncio.sleep(0.01)
    late = asyncio.create_task(_hold(lock.read(), late_in, asyncio.Event()))
    await asyncio.sleep(0.01)
    assert not late_in.is_set()

    writer.cancel()
    await asyncio.gather(writer, return_exceptions=True)
    await asyncio.wait_for(late_in.wait(), timeout=1)

    release_reader.set()
    late.cancel()
    await asyncio.gather(first, late, return_exceptions=True)
    assert lock.readers == 0


@pytest.mark.asyncio
async def test_handle_yields_repository(handle, memory_repository):
    async with handle.write() as repository:
        assert repository is memory_repository
        todo = await repository.create("buy milk")
        assert handle.lock.writing

    async with handle.read() as repository:
        assert handle.lock.readers == 1
        assert await repository.get(todo.id) == todo

    assert handle.lock.readers == 0
    assert not handle.lock.writing


@pytest.mark.asyncio
@pytest.mark.parametrize("mode", ["read", "write"])
async def test_cancel_during_contended_release_frees_the_lock(mode):
    lock = ReadWriteLock()
    entered, release = asyncio.Event(), asyncio.Event()

    holder = asyncio.create_task(_hold(getattr(lock, mode)(), entered, release))
    await asyncio.wait_for(entered.wait(), timeout=1)

    # Keep the condition busy so the holder's release has to wait for it
    async with lock._cond:
        release.set()
        await asyncio.sleep(0.01)
        holder.cancel()
        await asyncio.sleep(0.01)

    await asyncio.gather(holder, return_exceptions=True)
    assert lock.readers == 0
    assert not lock.writing

    writer_in = asyncio.Event()
    writer = asyncio.create_task(_hold(lock.write(), writer_in, asyncio.Event()))
    await asyncio.wait_for(writer_in.wait(), timeout=1)

    writer.cancel()
    await asyncio.gather(writer, return_exceptions=True)
