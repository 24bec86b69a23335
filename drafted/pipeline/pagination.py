"""Pagination over the filtered candidate sequence.

Pages are 1-indexed. ``current_page`` always stays within
[1, max(1, total_pages)].
"""

import logging
import math
from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageWindow(BaseModel):
    """Page-number buttons around the current page."""

    pages: list[int]
    show_first_page: bool
    show_leading_ellipsis: bool
    show_last_page: bool
    show_trailing_ellipsis: bool


class Paginator(Generic[T]):
    """Slices a sequence into fixed-size pages.

    Usage::

        pager = Paginator(page_size=20)
        pager.set_items(filtered)
        pager.set_page(3)
        rows = pager.visible_page()
    """

    def __init__(self, page_size: int = 20) -> None:
        if page_size < 1:
            msg = f"page_size must be >= 1, got {page_size}"
            raise ValueError(msg)
        self._page_size = page_size
        self._items: Sequence[T] = ()
        self._current_page = 1

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self._items) / self._page_size)

    @property
    def has_prev_page(self) -> bool:
        return self._current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self._current_page < self.total_pages

    def set_items(self, items: Sequence[T]) -> None:
        """Replace the paged sequence, keeping the current page when still in range."""
        self._items = items
        self._clamp()

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            msg = f"page_size must be >= 1, got {page_size}"
            raise ValueError(msg)
        self._page_size = page_size
        self._clamp()

    def set_page(self, page: int) -> int:
        """Move to ``page``, clamped to the valid range. Returns the page set."""
        clamped = max(1, min(int(page), max(1, self.total_pages)))
        if clamped != page:
            logger.debug("Page %d out of range, clamped to %d", page, clamped)
        self._current_page = clamped
        return clamped

    def next_page(self) -> int:
        return self.set_page(self._current_page + 1)

    def prev_page(self) -> int:
        return self.set_page(self._current_page - 1)

    def reset(self) -> None:
        self._current_page = 1

    def visible_page(self) -> list[T]:
        start = (self._current_page - 1) * self._page_size
        return list(self._items[start:start + self._page_size])

    def pages(self) -> list[list[T]]:
        """Every page in order; concatenated they equal the paged sequence."""
        return [
            list(self._items[i:i + self._page_size])
            for i in range(0, len(self._items), self._page_size)
        ]

    def display_range(self) -> tuple[int, int]:
        """1-based (first, last) item numbers shown, (0, 0) when empty."""
        if not self._items:
            return (0, 0)
        start = (self._current_page - 1) * self._page_size + 1
        end = min(self._current_page * self._page_size, len(self._items))
        return (start, end)

    def page_window(self, max_buttons: int = 5) -> PageWindow:
        """Page numbers to render, centred on the current page where possible."""
        total = self.total_pages
        current = self._current_page
        half = max_buttons // 2
        if total <= max_buttons or current <= half + 1:
            first = 1
        elif current >= total - half:
            first = total - max_buttons + 1
        else:
            first = current - half
        pages = [p for p in range(first, first + min(max_buttons, total)) if 1 <= p <= total]
        # Short page lists already contain the first and last page.
        overflow = total > max_buttons
        return PageWindow(
            pages=pages,
            show_first_page=overflow and current > half + 1,
            show_leading_ellipsis=overflow and current > half + 2,
            show_last_page=overflow and current < total - half,
            show_trailing_ellipsis=overflow and current < total - half - 1,
        )

    def _clamp(self) -> None:
        upper = max(1, self.total_pages)
        if self._current_page > upper:
            self._current_page = upper
