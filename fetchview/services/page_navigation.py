"""Page Navigation — next/prev/set_page shared by both paginated controllers.

Invariants:
    - Navigation only mutates PaginationState, then goes through _input_changed()
    - Out-of-range moves are silent no-ops returning None
"""

import asyncio
import logging

from fetchview.core.pagination import (
    PaginationState, can_advance, can_go_back, can_set_page, validate_page_size,
)

logger = logging.getLogger(__name__)


class PageNavigation:
    """Mixin for FetchEngine subclasses that own a PaginationState."""

    pagination: PaginationState
    name: str

    @property
    def page_number(self) -> int:
        return self.pagination.page_number

    @property
    def page_size(self) -> int:
        return self.pagination.page_size

    @property
    def total(self) -> int | None:
        return self.pagination.total

    @property
    def total_pages(self) -> int | None:
        return self.pagination.total_pages

    def next(self) -> "asyncio.Task | None":
        if not can_advance(self.page_number, self.total_pages):
            return None
        self.pagination.page_number += 1
        return self._input_changed()

    def prev(self) -> "asyncio.Task | None":
        if not can_go_back(self.page_number):
            return None
        self.pagination.page_number -= 1
        return self._input_changed()

    def set_page(self, page: int) -> "asyncio.Task | None":
        if not can_set_page(page, self.total_pages):
            logger.debug(
                "Page %s out of range", page,
                extra={"controller": self.name, "page_number": page},
            )
            return None
        self.pagination.page_number = page
        return self._input_changed()

    def _resize(self, size: int) -> "asyncio.Task | None":
        self.pagination.page_size = validate_page_size(size)
        return self._input_changed()
