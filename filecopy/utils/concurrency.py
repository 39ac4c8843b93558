"""
Bounded Concurrency

Worker-pool fan-out for asyncio code. Each call builds its own pool, so the
bound applies per phase rather than across a whole run.

Author: filecopy Project
License: MIT
"""

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Maximum number of in-flight filesystem operations per phase
MAX_PARALLELISM = 32


async def for_each_async(
    items: Iterable[T],
    callback: Callable[[T], Awaitable[None]],
    concurrency: int = MAX_PARALLELISM
) -> None:
    """
    Await ``callback(item)`` for every item with at most ``concurrency`` in flight.

    Workers pull from one shared iterator. The first exception cancels the
    remaining workers and is re-raised once they have wound down; items that
    were not started are never started.

    Args:
        items: Items to process (consumed lazily)
        callback: Coroutine function applied to each item
        concurrency: Maximum number of concurrent callbacks

    Raises:
        ValueError: If concurrency is less than 1
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    iterator = iter(items)

    async def _worker() -> None:
        # next() never yields to the event loop, so workers never share an item
        for item in iterator:
            await callback(item)

    workers = [asyncio.ensure_future(_worker()) for _ in range(concurrency)]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise
