"""Cancelable Request — awaitable handle over an in-flight request.

Invariants:
    - Wraps exactly one asyncio Future/Task; settles once
    - Awaiting after cancel() raises CancellationSignal, not asyncio.CancelledError
    - Cancellation of the awaiting task itself still propagates as CancelledError

Design Decisions:
    - Accepts any awaitable (coroutine, Task, Future): test fakes hand in a bare Future
"""

import asyncio
from typing import Any, Awaitable, Callable, Generator

from fetchview.core.errors import CancellationSignal, ErrorContext


class CancelableRequest:
    """Cancelable, awaitable handle returned by Transport.request()."""

    def __init__(
        self, awaitable: Awaitable[Any], *, request_id: str | None = None,
    ):
        self.request_id = request_id
        self._future = asyncio.ensure_future(awaitable)
        self._cancel_requested = False

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested

    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> None:
        if self._future.done():
            return
        self._cancel_requested = True
        self._future.cancel()

    def add_done_callback(self, fn: Callable[["CancelableRequest"], None]) -> None:
        self._future.add_done_callback(lambda _: fn(self))

    async def _wait(self) -> Any:
        try:
            return await self._future
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self._cancel_requested and not (current and current.cancelling()):
                raise CancellationSignal(
                    context=ErrorContext(request_id=self.request_id),
                ) from None
            raise

    def __await__(self) -> Generator[Any, None, Any]:
        return self._wait().__await__()
