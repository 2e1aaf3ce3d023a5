"""Exhaustive page draining for listing endpoints."""

from typing import Awaitable, Callable, List, Sequence, TypeVar

from loguru import logger

T = TypeVar('T')

DEFAULT_PER_PAGE = 25

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]


async def fetch_all(fetch_page: PageFetcher, per_page: int = DEFAULT_PER_PAGE) -> List[T]:
    """Request pages 1, 2, ... until one comes back empty.

    An empty page is the only termination signal; short pages and total count
    headers are not consulted.

    Args:
        fetch_page: Coroutine function taking (page, per_page) and returning
            the items of that page
        per_page: Items requested per page

    Returns:
        All items in the order they were returned
    """
    items: List[T] = []
    page = 1

    while True:
        batch = await fetch_page(page, per_page)
        if not batch:
            break

        items.extend(batch)
        page += 1

    logger.debug(f'Drained {page} page(s), {len(items)} item(s)')
    return items
