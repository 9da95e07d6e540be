"""Offset-Paginated Controller — collection view addressed by page number and size.

Invariants:
    - Transport params = get_pagination_params(SizeOffset(size, (page-1)*size), user_params)
    - total / total_pages updated only by successful responses
    - Navigation mutates page state synchronously; fetching goes through the
      parameter-change trigger, never straight to the transport
    - Boundary rules live in core/pagination.py (last page unreachable via next/set_page)

Design Decisions:
    - Projections and the params builder are injectable callables with pure defaults
    - set_size keeps the current page (no reset to page 1)
"""

import asyncio
from typing import Any, Callable, Mapping, TypeVar

from fetchview.config import get_settings
from fetchview.core.domain_types import FIRST_PAGE, ReentryPolicy
from fetchview.core.pagination import (
    PaginationState, SizeOffset,
    default_pagination_params, project_data, project_total, size_offset,
    validate_page_number, validate_page_size,
)
from fetchview.core.transport_protocols import Transport
from fetchview.infrastructure.provider import resolve_transport
from fetchview.services.fetch_engine import FetchEngine, RequestHandle
from fetchview.services.page_navigation import PageNavigation
from fetchview.services.transport_controllers import request_via_transport

T = TypeVar("T")

ParamsBuilder = Callable[[SizeOffset, Mapping[str, Any] | None], Any]


class PaginatedCollectionController(PageNavigation, FetchEngine[list[T]]):
    """Page-at-a-time collection backed by transport.request()."""

    reentry_policy = ReentryPolicy.IGNORE_WHILE_LOADING

    def __init__(
        self,
        endpoint: str,
        user_params: Mapping[str, Any] | None = None,
        current_page: int = FIRST_PAGE,
        *,
        page_size: int | None = None,
        get_total: Callable[[Any], int] = project_total,
        get_data: Callable[[Any], list] = project_data,
        get_pagination_params: ParamsBuilder = default_pagination_params,
        fetch_on_init: bool = True,
        transport: Transport | None = None,
        name: str | None = None,
    ):
        super().__init__(fetch_on_init=fetch_on_init, initial_data=[], name=name)
        self.transport = resolve_transport(transport)
        size = page_size if page_size is not None else get_settings().default_page_size
        self.pagination = PaginationState(
            page_number=validate_page_number(current_page),
            page_size=validate_page_size(size),
        )
        self.endpoint = endpoint
        self.user_params = user_params
        self._get_total = get_total
        self._get_data = get_data
        self._get_pagination_params = get_pagination_params

    def set_size(self, size: int) -> "asyncio.Task | None":
        """Refetch the current page with a new size."""
        return self._resize(size)

    def set_user_params(
        self, user_params: Mapping[str, Any] | None,
    ) -> "asyncio.Task | None":
        """Host filter change. Fetches when the derived params differ."""
        self.user_params = user_params
        return self._input_changed()

    def reload(
        self,
        new_params: Mapping[str, Any] | None = None,
        page_number: int | None = None,
    ) -> "asyncio.Task | None":
        """Replace filters and/or page, then fetch regardless of equality.

        new_params=None keeps the current filters; a falsy page_number keeps
        the current page. Validation runs before anything is applied.
        """
        page = (
            validate_page_number(page_number) if page_number
            else self.pagination.page_number
        )
        if new_params is not None:
            self.user_params = new_params
        self.pagination.page_number = page
        return self._retrigger()

    def _request_input(self) -> Any:
        window = size_offset(self.page_number, self.page_size)
        return self._get_pagination_params(window, self.user_params)

    async def _issue(self, handle: RequestHandle) -> Any:
        return await request_via_transport(self.transport, self.endpoint, handle)

    def _merge(self, response: Any) -> list[T]:
        data = self._get_data(response)
        self.pagination.record_total(self._get_total(response))
        return data
