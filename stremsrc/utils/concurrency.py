import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from stremsrc.core.logger import logger

T = TypeVar("T")
R = TypeVar("R")


async def map_with_concurrency_limit(
    items: Sequence[T], fn: Callable[[T], Awaitable[R]], limit: int = 5
) -> List[Optional[R]]:
    """
    Run ``fn`` over ``items`` with at most ``limit`` calls in flight.

    ``limit`` workers claim the next unprocessed index until none remain, so
    ``results[i]`` always belongs to ``items[i]``. A failing item records ``None``
    and leaves the other items untouched.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    results: List[Optional[R]] = [None] * len(items)
    next_index = 0

    async def worker():
        nonlocal next_index
        while next_index < len(items):
            index = next_index
            next_index += 1
            try:
                results[index] = await fn(items[index])
            except Exception as e:
                logger.debug(f"Item {index} failed: {e}")
                results[index] = None

    await asyncio.gather(*(worker() for _ in range(min(limit, len(items)))))
    return results
