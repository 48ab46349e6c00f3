"""Unit tests for notorica.core.concurrency."""

import asyncio

import pytest

from notorica.core.concurrency import LatestValueWriter, drain_writers
from notorica.core.exceptions import StorageError


class Recorder:
    """Async save callable that records values and can be paused."""

    def __init__(self, fail_on: set | None = None) -> None:
        self.saved: list = []
        self.fail_on = fail_on or set()
        self.gate = asyncio.Event()
        self.gate.set()

    async def __call__(self, value) -> None:
        await self.gate.wait()
        if value in self.fail_on:
            raise StorageError(f"cannot save {value}")
        self.saved.append(value)


class TestLatestValueWriter:
    @pytest.mark.asyncio
    async def test_submit_returns_immediately(self):
        recorder = Recorder()
        recorder.gate.clear()
        writer = LatestValueWriter("notes", recorder)

        writer.submit(1)

        assert writer.busy
        assert recorder.saved == []
        recorder.gate.set()
        await writer.drain()
        assert recorder.saved == [1]

    @pytest.mark.asyncio
    async def test_coalesces_to_newest_value(self):
        recorder = Recorder()
        recorder.gate.clear()
        writer = LatestValueWriter("notes", recorder)

        writer.submit(1)
        await asyncio.sleep(0)  # first write is now in flight
        writer.submit(2)
        writer.submit(3)
        recorder.gate.set()
        await writer.drain()

        assert recorder.saved == [1, 3]
        assert writer.writes == 2

    @pytest.mark.asyncio
    async def test_last_durable_value_is_last_submitted(self):
        recorder = Recorder()
        writer = LatestValueWriter("notes", recorder)

        for value in range(10):
            writer.submit(value)
            if value % 3 == 0:
                await asyncio.sleep(0)
        await writer.drain()

        assert recorder.saved[-1] == 9
        assert recorder.saved == sorted(recorder.saved)

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self):
        recorder = Recorder(fail_on={1})
        writer = LatestValueWriter("notes", recorder)

        writer.submit(1)
        await writer.drain()
        writer.submit(2)
        await writer.drain()

        assert writer.failures == 1
        assert writer.writes == 1
        assert recorder.saved == [2]

    @pytest.mark.asyncio
    async def test_one_task_per_writer(self):
        recorder = Recorder()
        recorder.gate.clear()
        writer = LatestValueWriter("notes", recorder)

        writer.submit(1)
        first_task = writer._task
        writer.submit(2)

        assert writer._task is first_task
        assert first_task.get_name() == "writer:notes"
        recorder.gate.set()
        await writer.drain()

    def test_submit_without_loop_defers_write(self):
        recorder = Recorder()
        writer = LatestValueWriter("notes", recorder)

        writer.submit(1)
        writer.submit(2)

        assert not writer.busy
        assert recorder.saved == []

        async def later():
            await writer.drain()

        asyncio.run(later())
        assert recorder.saved == [2]
        assert writer.writes == 1

    @pytest.mark.asyncio
    async def test_drain_when_idle(self):
        writer = LatestValueWriter("notes", Recorder())
        await writer.drain()
        assert not writer.busy


class TestDrainWriters:
    @pytest.mark.asyncio
    async def test_drains_all(self):
        first, second = Recorder(), Recorder()
        writers = [LatestValueWriter("a", first), LatestValueWriter("b", second)]
        writers[0].submit("x")
        writers[1].submit("y")

        await drain_writers(*writers)

        assert first.saved == ["x"]
        assert second.saved == ["y"]
        assert not any(writer.busy for writer in writers)
