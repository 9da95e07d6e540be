"""Query-Paginated Controller — paged query view with incremental accumulation.

Invariants:
    - get_data receives PageQueryArgs: params plus page_number, page_size, total,
      total_pages and the pending reset flag
    - Result validated as PageResult; a malformed result is published as InvalidResponseError
    - incremental=True and no reset requested -> append; otherwise replace
    - reset_data() clears data synchronously, regardless of in-flight attempts
    - Only (page_number, page_size, params) trigger fetches; totals never do

Design Decisions:
    - mutate() takes one patch for pagination fields and params, like a page/size change
    - A reset-only mutate() still refetches, so the view never stays empty by accident
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, TypeVar

from pydantic import ValidationError

from fetchview.config import get_settings
from fetchview.core.domain_types import FIRST_PAGE
from fetchview.core.errors import ConfigurationError, ErrorContext, InvalidResponseError
from fetchview.core.merge_data import merge_page_data
from fetchview.core.pagination import (
    PaginationState, validate_page_number, validate_page_size,
)
from fetchview.core.transport_protocols import Transport
from fetchview.schemas.query import PageQueryArgs, PageResult
from fetchview.services.fetch_engine import RequestHandle
from fetchview.services.page_navigation import PageNavigation
from fetchview.services.query_controllers import QueryController

T = TypeVar("T")

PageFetcher = Callable[[PageQueryArgs], Awaitable[Any]]

_PATCH_FIELDS = frozenset({"page_number", "page_size", "params", "reset_data"})


class QueryPaginatedController(PageNavigation, QueryController[list[T]]):
    """Paged, optionally accumulating, query-style collection."""

    def __init__(
        self,
        get_data: PageFetcher | None,
        initial: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        name: str | None = None,
    ):
        super().__init__(get_data, transport=transport, initial_data=[], name=name)
        initial = dict(initial or {})
        page_size = initial.get("page_size")
        if page_size is None:
            page_size = get_settings().default_page_size
        self.pagination = PaginationState(
            page_number=validate_page_number(initial.get("page_number", FIRST_PAGE)),
            page_size=validate_page_size(page_size),
        )
        self.params: dict[str, Any] = dict(initial.get("params") or {})
        self._reset_pending = False

    def set_page_size(self, size: int) -> "asyncio.Task | None":
        return self._resize(size)

    def reset_data(self) -> None:
        """Drop accumulated data now; the next merge replaces instead of appending."""
        self._reset_pending = True
        self.state.data = []
        self._publish()

    def mutate(
        self, patch: Mapping[str, Any] | None = None, **fields: Any,
    ) -> "asyncio.Task | None":
        """Apply page_number / page_size / params / reset_data and refetch."""
        changes = {**(patch or {}), **fields}
        unknown = set(changes) - _PATCH_FIELDS
        if unknown:
            raise ConfigurationError(
                f"Unknown pagination fields: {', '.join(sorted(unknown))}",
            )
        page_size = validate_page_size(changes.get("page_size", self.page_size))
        page_number = validate_page_number(
            changes.get("page_number", self.page_number),
        )
        params = (
            dict(changes["params"] or {}) if "params" in changes else self.params
        )

        # Every field validated above; apply them together
        reset = bool(changes.get("reset_data"))
        if reset:
            self.reset_data()
        self.pagination.page_size = page_size
        self.pagination.page_number = page_number
        self.params = params

        task = self._input_changed()
        if task is None and reset and self._active:
            return self._retrigger()
        return task

    def _request_input(self) -> Any:
        return (self.page_number, self.page_size, dict(self.params))

    def _build_args(self, handle: RequestHandle) -> PageQueryArgs:
        page_number, page_size, params = handle.request_input
        return PageQueryArgs(
            request_id=handle.id,
            initial=handle.initial,
            params=dict(params),
            page_number=page_number,
            page_size=page_size,
            total=self.total,
            total_pages=self.total_pages,
            reset_data=self._reset_pending,
        )

    def _merge(self, result: Any) -> list[T]:
        try:
            page = result if isinstance(result, PageResult) else PageResult.model_validate(
                result, from_attributes=True,
            )
        except ValidationError as e:
            raise InvalidResponseError(
                f"Fetch function returned an invalid page: {e.error_count()} error(s)",
                ErrorContext(controller=self.name),
            ) from e
        merged = merge_page_data(
            self.state.data, page.data, page.incremental,
            self._reset_pending or page.reset_data,
        )
        self._reset_pending = False
        self.pagination.record_total(page.total)
        return merged
