"""Tests for RecurringTask."""

import asyncio

import pytest

from conftest import wait_until
from salesbot.channel.scheduler import RecurringTask


class TestRecurringTask:
    """Tests for the recurring task handle."""

    @pytest.mark.asyncio
    async def test_ticks_until_cancelled(self) -> None:
        """The callback runs repeatedly until cancel()."""
        ticks = []

        async def tick() -> None:
            ticks.append(1)

        task = RecurringTask(tick, interval=0, initial_delay=0).start()
        await wait_until(lambda: len(ticks) >= 3)
        task.cancel()
        await task.wait_closed()
        count = len(ticks)
        await asyncio.sleep(0.02)

        assert not task.running
        assert len(ticks) == count

    @pytest.mark.asyncio
    async def test_ticks_never_overlap(self) -> None:
        """A slow callback delays the next tick instead of running beside it."""
        in_flight = 0
        max_in_flight = 0
        ticks = 0

        async def slow_tick() -> None:
            nonlocal in_flight, max_in_flight, ticks
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            ticks += 1

        task = RecurringTask(slow_tick, interval=0, initial_delay=0).start()
        await wait_until(lambda: ticks >= 3)
        task.cancel()
        await task.wait_closed()

        assert max_in_flight == 1

    @pytest.mark.asyncio
    async def test_cancel_from_callback(self) -> None:
        """Cancelling inside the callback stops further ticks without error."""
        ticks = []
        task: RecurringTask

        async def tick() -> None:
            ticks.append(1)
            task.cancel()

        task = RecurringTask(tick, interval=0, initial_delay=0).start()
        await task.wait_closed()

        assert ticks == [1]
        assert not task.running

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self) -> None:
        async def tick() -> None:
            pass

        task = RecurringTask(tick, interval=10).start()
        task.cancel()
        task.cancel()
        await task.wait_closed()
        task.cancel()

        assert not task.running

    @pytest.mark.asyncio
    async def test_failing_tick_keeps_running(self) -> None:
        """An exception in one tick is logged and the next tick still runs."""
        calls = []

        async def flaky() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")

        task = RecurringTask(flaky, interval=0, initial_delay=0).start()
        await wait_until(lambda: len(calls) >= 2)
        task.cancel()
        await task.wait_closed()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_initial_delay_defaults_to_interval(self) -> None:
        """Without an initial delay the first tick waits one interval."""
        ticks = []

        async def tick() -> None:
            ticks.append(1)

        task = RecurringTask(tick, interval=10).start()
        await asyncio.sleep(0.02)

        assert ticks == []
        task.cancel()
        await task.wait_closed()

    @pytest.mark.asyncio
    async def test_start_twice_rejected(self) -> None:
        async def tick() -> None:
            pass

        task = RecurringTask(tick, interval=10).start()
        with pytest.raises(RuntimeError):
            task.start()
        task.cancel()
        await task.wait_closed()
