"""Bounded-concurrency execution of independent async tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

IMAGE_CONCURRENCY = 2
AUDIO_CONCURRENCY = 4

# Tasks left running after a batch failed are referenced here until they finish.
_DETACHED: Set["asyncio.Task[None]"] = set()


async def run_bounded(tasks: Sequence[Callable[[], Awaitable[T]]], limit: int) -> List[T]:
    """Run task factories with at most ``limit`` in flight; results keep task order.

    The first failure is raised immediately. Tasks already running at that point
    are left to finish in the background and their results are discarded; tasks
    still waiting for a slot never start.
    """

    if limit < 1:
        raise ValueError("limit must be at least 1")
    if not tasks:
        return []

    semaphore = asyncio.Semaphore(limit)
    results: List[Optional[T]] = [None] * len(tasks)
    failed = asyncio.Event()

    async def _run(index: int, factory: Callable[[], Awaitable[T]]) -> None:
        async with semaphore:
            if failed.is_set():
                return
            try:
                results[index] = await factory()
            except Exception:
                failed.set()
                logger.error("Task %d failed", index, extra={"task_index": index})
                raise

    running = [asyncio.ensure_future(_run(index, factory)) for index, factory in enumerate(tasks)]
    done, pending = await asyncio.wait(running, return_when=asyncio.FIRST_EXCEPTION)

    errors = [task for task in running if task in done and task.exception() is not None]
    if errors:
        for task in pending:
            _DETACHED.add(task)
            task.add_done_callback(_release_detached)
        raise errors[0].exception()  # type: ignore[misc]

    return results  # type: ignore[return-value]


def _release_detached(task: "asyncio.Task[None]") -> None:
    _DETACHED.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Detached task finished with an error after its batch failed")


__all__ = ["run_bounded", "IMAGE_CONCURRENCY", "AUDIO_CONCURRENCY"]
