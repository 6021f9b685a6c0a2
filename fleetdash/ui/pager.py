"""
FleetDash UI - Host pagination.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], page_size: int) -> list[list[T]]:
    """
    Split items into pages of `page_size`, keeping order.

    The last page may be shorter. No items gives no pages.

    Raises:
        ValueError: If page_size is below 1.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got: {page_size}")
    return [list(items[start : start + page_size]) for start in range(0, len(items), page_size)]


def page_count(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got: {page_size}")
    return -(-total // page_size)


def next_page(index: int, count: int) -> int:
    """Index of the following page, wrapping to 0 after the last one."""
    if count <= 0:
        raise ValueError("cannot navigate without pages")
    return (index + 1) % count


def prev_page(index: int, count: int) -> int:
    """Index of the preceding page, wrapping to the last one before 0."""
    if count <= 0:
        raise ValueError("cannot navigate without pages")
    return (index - 1) % count
