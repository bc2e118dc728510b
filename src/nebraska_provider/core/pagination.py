"""
Lookup of a single record in a paginated Nebraska collection.

The list endpoints have no server-side filtering, so finding a channel by
name and arch (or a package by version and arch) means walking the pages
one by one until a record matches.
"""

import logging
from typing import Callable, Iterable, Optional, Protocol, Sequence, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 10

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Page(Protocol[T_co]):
    """A page of results as returned by the paginate endpoints."""

    @property
    def total_count(self) -> int: ...

    @property
    def items(self) -> Sequence[T_co]: ...


def first_match(items: Iterable[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """Return the first item satisfying predicate, or None."""
    for item in items:
        if predicate(item):
            return item
    return None


def find_in_pages(
    fetch_page: Callable[[int, int], Page[T]],
    predicate: Callable[[T], bool],
    per_page: int = DEFAULT_PER_PAGE,
) -> Optional[T]:
    """Scan pages until a record matches.

    The page count is ``total_count // per_page`` as reported by page 1, and
    pages are requested while ``page <= total_pages``; so a collection of 15
    records is read as pages 1 and 2, and an empty one costs a single fetch.

    Args:
        fetch_page: Called with (page, per_page); errors propagate unchanged
        predicate: Match condition for a single record
        per_page: Page size

    Returns:
        First matching record in server order, or None if pages are exhausted
    """
    page = 1
    result = fetch_page(page, per_page)
    total_pages = result.total_count // per_page
    logger.debug(f"Fetched page {page} ({result.total_count} records, {total_pages} full pages)")

    found = first_match(result.items, predicate)
    while found is None and page <= total_pages:
        page += 1
        result = fetch_page(page, per_page)
        logger.debug(f"Fetched page {page}")
        found = first_match(result.items, predicate)

    return found
