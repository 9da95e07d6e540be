"""Transport Controllers — entity and collection views fetched from one endpoint.

Invariants:
    - Transport resolved at construction; missing transport raises ConfigurationError
    - Re-entrancy: IGNORE_WHILE_LOADING (new params remembered, not fetched)
    - fetch_on_init=False: no request until reload() or a parameter change after activation
    - Request issued with the params captured when the attempt was triggered
"""

import asyncio
from typing import Any, TypeVar

from fetchview.core.domain_types import ReentryPolicy
from fetchview.core.transport_protocols import Transport
from fetchview.infrastructure.provider import resolve_transport
from fetchview.services.fetch_engine import FetchEngine, RequestHandle

T = TypeVar("T")


class EntityController(FetchEngine[T]):
    """Single resource fetched with transport.request(endpoint, params)."""

    reentry_policy = ReentryPolicy.IGNORE_WHILE_LOADING

    def __init__(
        self,
        endpoint: str,
        params: Any = None,
        fetch_on_init: bool = True,
        *,
        transport: Transport | None = None,
        name: str | None = None,
    ):
        super().__init__(fetch_on_init=fetch_on_init, name=name)
        self.transport = resolve_transport(transport)
        self.endpoint = endpoint
        self.params = params

    def set_params(self, params: Any) -> "asyncio.Task | None":
        """Host parameter change. Fetches when params differ by value."""
        self.params = params
        return self._input_changed()

    def reload(self, new_params: Any = None) -> "asyncio.Task | None":
        """Replace params when given and fetch regardless of equality."""
        if new_params is not None:
            self.params = new_params
        return self._retrigger()

    def _request_input(self) -> Any:
        return self.params

    async def _issue(self, handle: RequestHandle) -> Any:
        return await request_via_transport(self.transport, self.endpoint, handle)


async def request_via_transport(
    transport: Transport, endpoint: str, handle: RequestHandle,
) -> Any:
    """Issue the attempt through the transport, keeping its cancelable on the handle."""
    cancelable = transport.request(
        endpoint, handle.request_input, request_id=handle.id,
    )
    handle.cancelable = cancelable
    return await cancelable


class CollectionController(EntityController[list[T]]):
    """List-valued resource fetched from one endpoint."""
