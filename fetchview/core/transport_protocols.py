"""Boundary Protocols — contracts between controllers and the transport.

Invariants:
    - Controllers NEVER import a concrete transport — only these Protocols
    - A CancelableHandle settles exactly once: value, error, or CancellationSignal

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - request() is synchronous and returns an awaitable handle, so the caller can
      store the handle before suspending on it
"""

from typing import Any, Generator, Protocol

from fetchview.core.domain_types import RequestId


class CancelableHandle(Protocol):
    """Awaitable in-flight request that can be cancelled cooperatively."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...

    def __await__(self) -> Generator[Any, None, Any]: ...


class Transport(Protocol):
    """Contract for the HTTP client — implemented by infrastructure."""

    def request(
        self,
        endpoint: str,
        params: Any = None,
        *,
        request_id: RequestId | None = None,
    ) -> CancelableHandle: ...

    def lookup_cancelable(self, request_id: RequestId) -> CancelableHandle | None: ...
