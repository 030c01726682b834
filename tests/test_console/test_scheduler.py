"""
Tests for the scheduler implementations.
"""

import asyncio

import pytest

from operator_console.scheduler import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    """Tests for the virtual-clock scheduler."""

    def test_call_later_runs_when_due(self, scheduler: ManualScheduler):
        calls = []
        scheduler.call_later(5.0, calls.append, "x")

        assert scheduler.advance(4.999) == 0
        assert calls == []
        assert scheduler.advance(0.002) == 1
        assert calls == ["x"]

    def test_clock_moves_to_target(self, scheduler: ManualScheduler):
        seen = []
        scheduler.call_later(2.0, lambda: seen.append(scheduler.now()))
        scheduler.advance(3.0)

        assert seen == [2.0]
        assert scheduler.now() == 3.0

    def test_due_callbacks_run_in_time_order(self, scheduler: ManualScheduler):
        calls = []
        scheduler.call_later(3.0, calls.append, "late")
        scheduler.call_later(1.0, calls.append, "early")
        scheduler.call_later(1.0, calls.append, "early-2")
        scheduler.advance(5.0)

        assert calls == ["early", "early-2", "late"]

    def test_call_every(self, scheduler: ManualScheduler):
        ticks = []
        scheduler.call_every(10.0, lambda: ticks.append(scheduler.now()))

        scheduler.advance(35.0)
        assert ticks == [10.0, 20.0, 30.0]

    def test_cancel_prevents_runs(self, scheduler: ManualScheduler):
        ticks = []
        task = scheduler.call_every(1.0, lambda: ticks.append(1))
        scheduler.advance(2.0)

        assert task.cancel() is True
        assert task.cancel() is False
        scheduler.advance(10.0)
        assert len(ticks) == 2
        assert scheduler.pending() == 0

    def test_callback_can_cancel_later_task(self, scheduler: ManualScheduler):
        """A task cancelled by an earlier callback in the same advance never runs."""
        calls = []
        victim = scheduler.call_later(2.0, calls.append, "victim")
        scheduler.call_later(1.0, victim.cancel)
        scheduler.advance(5.0)

        assert calls == []

    def test_rejects_bad_arguments(self, scheduler: ManualScheduler):
        with pytest.raises(ValueError):
            scheduler.advance(-1)
        with pytest.raises(ValueError):
            scheduler.call_every(0, lambda: None)


class TestAsyncioScheduler:
    """Tests for the event-loop backed scheduler."""

    def test_call_later_and_cancel(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            calls = []
            scheduler.call_later(0.01, calls.append, "fired")
            cancelled = scheduler.call_later(0.01, calls.append, "cancelled")
            cancelled.cancel()
            await asyncio.sleep(0.05)
            return calls

        assert asyncio.run(scenario()) == ["fired"]

    def test_call_every_survives_failing_callback(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            ticks = []

            def tick():
                ticks.append(1)
                if len(ticks) == 1:
                    raise RuntimeError("boom")

            loop = asyncio.get_running_loop()
            loop.set_exception_handler(lambda loop, context: None)
            task = scheduler.call_every(0.01, tick)
            await asyncio.sleep(0.055)
            task.cancel()
            count = len(ticks)
            await asyncio.sleep(0.03)
            return count, len(ticks)

        count, final = asyncio.run(scenario())
        assert count >= 2
        assert final == count
