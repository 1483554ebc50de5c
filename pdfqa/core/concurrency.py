"""Bounded fan-out of async jobs that stops at the first failure."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")


async def run_bounded(jobs: Sequence[Callable[[], Awaitable[T]]], limit: int) -> list[T]:
    """Run jobs with at most ``limit`` in flight and return results in job order.

    When a job raises, jobs that have not started are never started, those
    still waiting are cancelled, and the first error is re-raised.
    """
    semaphore = asyncio.Semaphore(limit)
    failed = False

    async def _run(job: Callable[[], Awaitable[T]]) -> T:
        nonlocal failed
        async with semaphore:
            if failed:
                raise asyncio.CancelledError()
            try:
                return await job()
            except Exception:
                failed = True
                raise

    tasks = [asyncio.ensure_future(_run(job)) for job in jobs]
    if not tasks:
        return []
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    errors = [t.exception() for t in tasks if not t.cancelled() and t.exception() is not None]
    if errors:
        raise errors[0]
    return [t.result() for t in tasks]
