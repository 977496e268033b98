"""Tests for the bounded task runner."""

import asyncio

import pytest

from services.orchestrator.app.concurrency import run_bounded


pytestmark = pytest.mark.anyio("asyncio")


async def test_results_follow_task_order_and_limit_holds() -> None:
    in_flight = 0
    peak = 0

    def make(index: int, delay: float):
        async def task() -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(delay)
            in_flight -= 1
            return index * 10

        return task

    delays = [0.03, 0.01, 0.02, 0.0, 0.01, 0.02, 0.0]
    results = await run_bounded([make(i, d) for i, d in enumerate(delays)], limit=2)

    assert results == [i * 10 for i in range(len(delays))]
    assert peak == 2


async def test_empty_task_list() -> None:
    assert await run_bounded([], limit=4) == []


async def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        await run_bounded([], limit=0)


async def test_first_failure_propagates_and_queued_tasks_never_start() -> None:
    started: list[int] = []
    finished: list[int] = []

    def make(index: int):
        async def task() -> int:
            started.append(index)
            if index == 0:
                raise RuntimeError("image upstream failed")
            await asyncio.sleep(0.02)
            finished.append(index)
            return index

        return task

    with pytest.raises(RuntimeError, match="image upstream failed"):
        await run_bounded([make(i) for i in range(5)], limit=2)

    await asyncio.sleep(0.05)
    assert started == [0, 1]
    # The in-flight task is not cancelled; it completes in the background.
    assert finished == [1]
