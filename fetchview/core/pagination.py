"""Pagination — page bookkeeping, offset math and navigation boundary rules.

Invariants:
    - page_number >= 1, page_size > 0
    - total_pages = round_half_up(total / page_size), recomputed only on success
    - can_advance / can_set_page treat page >= total_pages as out of range
      (the last page is unreachable through next/set_page);
      page 1 is the one exception once total_pages >= 1
    - All functions PURE: navigation returns a verdict, the shell mutates

Design Decisions:
    - Half-up rounding (45/20 -> 2, 50/20 -> 3) instead of Python's banker's round()
    - Projections accept mappings and attribute objects alike
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping

from fetchview.core.domain_types import DEFAULT_PAGE_SIZE, FIRST_PAGE
from fetchview.core.errors import ConfigurationError


@dataclass(frozen=True)
class SizeOffset:
    """Transport-level window derived from page state."""
    size: int
    offset: int

    def as_dict(self) -> dict:
        return {"size": self.size, "offset": self.offset}


@dataclass
class PaginationState:
    """Page position plus totals learned from the last successful response."""

    page_number: int = FIRST_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    total: int | None = None
    total_pages: int | None = None

    def record_total(self, total: int) -> None:
        self.total = total
        self.total_pages = compute_total_pages(total, self.page_size)


# ─── Math ────────────────────────────────────────────────────────

def compute_total_pages(total: int, page_size: int) -> int:
    """Half-up rounded page count. Not a ceiling: 45 items / 20 per page -> 2."""
    return math.floor(total / page_size + 0.5)


def size_offset(page_number: int, page_size: int) -> SizeOffset:
    return SizeOffset(size=page_size, offset=(page_number - 1) * page_size)


def default_pagination_params(
    window: SizeOffset, user_params: Mapping[str, Any] | None,
) -> dict:
    """size/offset base with caller filters spread over it."""
    return {**window.as_dict(), **(user_params or {})}


# ─── Navigation verdicts ─────────────────────────────────────────

def can_advance(page_number: int, total_pages: int | None) -> bool:
    return page_number < (total_pages or 0)


def can_go_back(page_number: int) -> bool:
    return page_number != FIRST_PAGE


def can_set_page(page: int, total_pages: int | None) -> bool:
    pages = total_pages or 0
    if page == FIRST_PAGE:
        return pages >= 1
    return FIRST_PAGE <= page < pages


# ─── Response projections ────────────────────────────────────────

def _field(response: Any, name: str) -> Any:
    if isinstance(response, Mapping):
        return response[name]
    return getattr(response, name)


def project_data(response: Any) -> list:
    return _field(response, "data")


def project_total(response: Any) -> int:
    return _field(response, "total")


# ─── Validation ──────────────────────────────────────────────────

def validate_page_number(page: int) -> int:
    if page < FIRST_PAGE:
        raise ConfigurationError(f"page_number must be >= {FIRST_PAGE}, got {page}")
    return page


def validate_page_size(size: int) -> int:
    if size <= 0:
        raise ConfigurationError(f"page_size must be > 0, got {size}")
    return size
