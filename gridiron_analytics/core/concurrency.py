"""Fan-out helpers for asyncio.

The engine is single-threaded: "concurrent" means many store round trips in
flight at once on one event loop. Two patterns cover every fan-out:

- settle_all: start everything, wait for everything, keep the successes and
  report the failures separately (one failing player never sinks the batch)
- with_timeout: bound a whole category's latency and fall back to a default
"""

import asyncio
import logging
from collections.abc import Awaitable, Hashable, Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


async def settle_all(
    jobs: Iterable[tuple[K, Awaitable[T]]],
) -> tuple[dict[K, T], dict[K, BaseException]]:
    """Await keyed awaitables concurrently and split results from failures.

    Returns (results, failures), both keyed like the input. Results keep the
    input order.
    """
    jobs = list(jobs)
    if not jobs:
        return {}, {}

    outcomes = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)

    results: dict[K, T] = {}
    failures: dict[K, BaseException] = {}
    for (key, _), outcome in zip(jobs, outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            failures[key] = outcome
        else:
            results[key] = outcome
    return results, failures


async def with_timeout(awaitable: Awaitable[T], seconds: float, default: T, *, label: str = "task") -> T:
    """Await with a deadline; on expiry log a warning and return default."""
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        logger.warning(f"{label} did not finish within {seconds:.1f}s; returning empty result")
        return default
