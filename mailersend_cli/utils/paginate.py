"""Aggregation of page-numbered list endpoints."""

from typing import Callable, List, Tuple, TypeVar

T = TypeVar("T")

# A fetcher receives (page, per_page) and returns (items, has_next).
PageFetcher = Callable[[int, int], Tuple[List[T], bool]]

DEFAULT_PER_PAGE = 25
# The API rejects page sizes below this.
MIN_PER_PAGE = 10


def page_size_for(limit: int) -> int:
    """Pick the page size for a given item cap (0 means no cap)."""
    per_page = DEFAULT_PER_PAGE
    if 0 < limit < per_page:
        per_page = limit
    return max(per_page, MIN_PER_PAGE)


def fetch_all(fetcher: PageFetcher[T], limit: int = 0) -> List[T]:
    """Fetch pages in ascending order until exhausted or ``limit`` is reached.

    Args:
        fetcher: Single-page fetcher; any exception it raises propagates
        limit: Maximum number of items to return, 0 for all

    Returns:
        Items in the order the fetcher yielded them
    """
    per_page = page_size_for(limit)
    items: List[T] = []
    page = 1

    while True:
        page_items, has_next = fetcher(page, per_page)
        items.extend(page_items)

        if limit > 0 and len(items) >= limit:
            return items[:limit]

        if not has_next:
            return items

        page += 1
