"""Query Controllers — views fetched by an arbitrary caller-supplied async function.

Invariants:
    - get_data receives QueryArgs(request_id, initial, params); initial only on attempt #1
    - Re-entrancy: SUPERSEDE — every trigger cancels the in-flight attempt and restarts
    - cancel() prefers the transport's cancelable registry, falling back to the attempt task
    - mutate() shallow-merges into params; reload() refetches with unchanged params

Design Decisions:
    - Transport optional: only consulted for its registry, the caller does the IO
    - params copied into QueryArgs so a fetch function cannot alter controller state
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, TypeVar

from fetchview.core.domain_types import ReentryPolicy, RequestId
from fetchview.core.errors import ConfigurationError
from fetchview.core.transport_protocols import CancelableHandle, Transport
from fetchview.infrastructure.provider import registered_transport
from fetchview.schemas.query import QueryArgs
from fetchview.services.fetch_engine import FetchEngine, RequestHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryFetcher = Callable[[QueryArgs], Awaitable[Any]]


class QueryController(FetchEngine[T]):
    """Shared behaviour of every query-style controller."""

    reentry_policy = ReentryPolicy.SUPERSEDE

    def __init__(
        self,
        get_data: Callable[..., Awaitable[Any]] | None,
        *,
        transport: Transport | None = None,
        initial_data: T | None = None,
        name: str | None = None,
    ):
        if get_data is None:
            raise ConfigurationError(
                f"{name or type(self).__name__}: no fetch function bound",
            )
        super().__init__(fetch_on_init=True, initial_data=initial_data, name=name)
        self._get_data = get_data
        self.transport = transport if transport is not None else registered_transport()

    @property
    def initial(self) -> bool:
        """True while the most recent attempt is the controller's first."""
        return self.attempts <= 1

    def cancel(self) -> bool:
        """Cancel the in-flight attempt. Returns False when nothing is in flight."""
        handle = self._handle
        if handle is None:
            return False
        cancelable = self._lookup_cancelable(handle.id)
        if cancelable is not None:
            logger.debug(
                "Cancelling via transport registry",
                extra={"controller": self.name, "request_id": handle.id},
            )
            cancelable.cancel()
        elif handle.task is not None:
            handle.task.cancel()
        return True

    def reload(self) -> "asyncio.Task | None":
        return self._retrigger()

    async def _issue(self, handle: RequestHandle) -> Any:
        return await self._get_data(self._build_args(handle))

    def _build_args(self, handle: RequestHandle) -> QueryArgs:
        raise NotImplementedError

    def _lookup_cancelable(self, request_id: RequestId) -> CancelableHandle | None:
        lookup = getattr(self.transport, "lookup_cancelable", None)
        if lookup is None:
            return None
        return lookup(request_id)


class QueryEntityController(QueryController[T]):
    """Single resource returned directly by the caller's fetch function."""

    def __init__(
        self,
        get_data: QueryFetcher | None,
        initial_params: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        name: str | None = None,
    ):
        super().__init__(get_data, transport=transport, name=name)
        self.params: dict[str, Any] = dict(initial_params or {})

    def mutate(self, params: Mapping[str, Any]) -> "asyncio.Task | None":
        """Shallow-merge into params and fetch when they changed."""
        self.params = {**self.params, **params}
        return self._input_changed()

    def set_params(self, params: Mapping[str, Any] | None) -> "asyncio.Task | None":
        self.params = dict(params or {})
        return self._input_changed()

    def _request_input(self) -> Any:
        return dict(self.params)

    def _build_args(self, handle: RequestHandle) -> QueryArgs:
        return QueryArgs(
            request_id=handle.id,
            initial=handle.initial,
            params=dict(handle.request_input),
        )


class QueryCollectionController(QueryEntityController[list[T]]):
    """List-valued resource returned by the caller's fetch function."""
