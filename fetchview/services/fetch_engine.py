"""Fetch Engine — the request/response state machine shared by every controller.

Invariants:
    - IDLE -> LOADING -> {SUCCESS, FAILED}; terminal states return to LOADING on new input
    - A result is published only if its RequestHandle is still the current one
    - Cancellation never touches data or error; only a current handle drops loading
    - Nothing is published after close()
    - One asyncio.Task per attempt; the handle owns the task and the transport cancelable

Design Decisions:
    - Subclasses supply three hooks: _request_input (what triggers compare by value),
      _issue (how the request is made), _merge (how the result becomes data)
    - Re-entrancy is a class attribute: IGNORE_WHILE_LOADING for transport-bound
      controllers, SUPERSEDE (cancel-and-restart) for query controllers
    - Listener exceptions are logged, never propagated into the attempt task
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from fetchview.core.domain_types import (
    FetchStatus, ReentryPolicy, RequestId, new_request_id,
)
from fetchview.core.errors import CancellationSignal, ConfigurationError
from fetchview.core.fetch_state import FetchState
from fetchview.core.transport_protocols import CancelableHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[FetchState], object]

_UNSET: Any = object()


@dataclass(eq=False)
class RequestHandle:
    """One fetch attempt: identity, the input it was issued with, and what to cancel."""
    id: RequestId
    request_input: Any = None
    initial: bool = False
    cancelable: CancelableHandle | None = None
    task: "asyncio.Task | None" = None


class FetchEngine(Generic[T]):
    """Drives one resource view through repeated fetch attempts."""

    reentry_policy: ReentryPolicy = ReentryPolicy.IGNORE_WHILE_LOADING

    def __init__(
        self,
        *,
        fetch_on_init: bool = True,
        initial_data: T | None = None,
        name: str | None = None,
    ):
        self.state: FetchState[T] = FetchState(data=initial_data)
        self.fetch_on_init = fetch_on_init
        self.name = name or type(self).__name__
        self._handle: RequestHandle | None = None
        self._last_input: Any = _UNSET
        self._listeners: list[Listener] = []
        self._attempts = 0
        self._active = False
        self._closed = False

    # --- Published state ------------------------------------------------------

    @property
    def data(self) -> T | None:
        return self.state.data

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> BaseException | None:
        return self.state.error

    @property
    def status(self) -> FetchStatus:
        return self.state.status

    @property
    def request_id(self) -> RequestId | None:
        """Identifier of the in-flight attempt, if any."""
        return self._handle.id if self._handle else None

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback receiving a FetchState snapshot on every publication."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Lifecycle ------------------------------------------------------------

    def activate(self) -> "asyncio.Task | None":
        """First activation (mount). Fetches when fetch_on_init is set."""
        if self._closed:
            raise ConfigurationError(f"{self.name} is closed and cannot be activated")
        if self._active:
            return None
        self._active = True
        self._last_input = self._request_input()
        if not self.fetch_on_init:
            return None
        return self._trigger()

    def close(self) -> None:
        """Teardown: cancel the active attempt and stop publishing."""
        if self._closed:
            return
        self._closed = True
        handle, self._handle = self._handle, None
        if handle is not None:
            logger.debug(
                "Cancelling in-flight request on teardown",
                extra={"controller": self.name, "request_id": handle.id},
            )
            self._release(handle)
        self._listeners.clear()

    async def aclose(self) -> None:
        handle = self._handle
        self.close()
        if handle is not None and handle.task is not None:
            await asyncio.wait({handle.task})

    async def wait(self) -> None:
        """Wait until no attempt is in flight. Never raises the attempt's outcome."""
        handle = self._handle
        while handle is not None and handle.task is not None:
            await asyncio.wait({handle.task})
            if self._handle is handle:
                break
            handle = self._handle

    async def __aenter__(self):
        self.activate()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- Triggers -------------------------------------------------------------

    def _input_changed(self) -> "asyncio.Task | None":
        """Parameter-change trigger: fetch only when the derived input differs by value."""
        if not self._active or self._closed:
            return None
        current = self._request_input()
        if current == self._last_input:
            return None
        self._last_input = current
        return self._trigger()

    def _retrigger(self) -> "asyncio.Task | None":
        """Explicit retrigger: fetch even though the input is unchanged."""
        if self._closed:
            return None
        self._active = True
        self._last_input = self._request_input()
        return self._trigger()

    def _trigger(self) -> "asyncio.Task | None":
        if (
            self.state.loading
            and self.reentry_policy == ReentryPolicy.IGNORE_WHILE_LOADING
        ):
            logger.debug(
                "Trigger ignored while loading", extra={"controller": self.name},
            )
            return None

        # Raises before any state change when no loop is running
        loop = asyncio.get_running_loop()

        previous = self._handle
        if previous is not None:
            logger.debug(
                "Superseding in-flight request",
                extra={"controller": self.name, "request_id": previous.id},
            )
            self._release(previous)

        handle = RequestHandle(
            id=new_request_id(),
            request_input=self._last_input,
            initial=self._attempts == 0,
        )
        self._attempts += 1
        self._handle = handle
        self.state.begin()
        handle.task = loop.create_task(
            self._attempt(handle), name=f"{self.name}:{handle.id}",
        )
        logger.debug(
            "Request issued", extra={"controller": self.name, "request_id": handle.id},
        )
        self._publish()
        return handle.task

    # --- Attempt --------------------------------------------------------------

    async def _attempt(self, handle: RequestHandle) -> None:
        try:
            result = await self._issue(handle)
            if not self._is_current(handle):
                logger.debug(
                    "Discarding superseded result",
                    extra={"controller": self.name, "request_id": handle.id},
                )
                return
            data = self._merge(result)
        except CancellationSignal:
            self._settle_cancelled(handle)
            return
        except asyncio.CancelledError:
            self._settle_cancelled(handle)
            raise
        except Exception as e:
            if not self._is_current(handle):
                logger.debug(
                    "Discarding superseded failure: %s", e,
                    extra={"controller": self.name, "request_id": handle.id},
                )
                return
            self._handle = None
            self.state.fail(e)
            logger.warning(
                "Request failed: %s", e,
                extra={
                    "controller": self.name, "request_id": handle.id,
                    "error_code": getattr(e, "code", type(e).__name__),
                },
            )
            self._publish()
            return

        self._handle = None
        self.state.succeed(data)
        self._publish()

    def _settle_cancelled(self, handle: RequestHandle) -> None:
        logger.debug(
            "Request cancelled", extra={"controller": self.name, "request_id": handle.id},
        )
        if not self._is_current(handle):
            return
        self._handle = None
        self.state.settle_cancelled()
        self._publish()

    def _is_current(self, handle: RequestHandle) -> bool:
        return handle is self._handle and not self._closed

    def _release(self, handle: RequestHandle) -> None:
        cancelable = handle.cancelable or self._lookup_cancelable(handle.id)
        if cancelable is not None:
            cancelable.cancel()
        if handle.task is not None and not handle.task.done():
            handle.task.cancel()

    def _publish(self) -> None:
        if self._closed:
            return
        snapshot = self.state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(
                    "State listener failed: %s", e,
                    extra={"controller": self.name}, exc_info=True,
                )

    # --- Hooks ----------------------------------------------------------------

    def _request_input(self) -> Any:
        """Value that parameter-change triggers compare."""
        raise NotImplementedError

    async def _issue(self, handle: RequestHandle) -> Any:
        raise NotImplementedError

    def _merge(self, result: Any) -> T:
        return result

    def _lookup_cancelable(self, request_id: RequestId) -> CancelableHandle | None:
        return None
