"""Fetch State — per-controller published state and its transitions.

Invariants:
    - loading=True implies no terminal transition yet for the current generation
    - succeed() clears error; fail() keeps data and overwrites any prior error
    - begin() never clears data (stale-while-revalidating for every variant)
    - settle_cancelled() touches only loading/status, never data or error

Design Decisions:
    - Mutable dataclass owned by one controller; hosts receive snapshot() copies
"""

from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from fetchview.core.domain_types import FetchStatus

T = TypeVar("T")


@dataclass
class FetchState(Generic[T]):
    """What a controller publishes: data, loading flag and last error."""

    data: T | None = None
    loading: bool = False
    error: BaseException | None = None
    status: FetchStatus = FetchStatus.IDLE

    # Status to fall back to when an attempt is cancelled
    _resume_status: FetchStatus = field(default=FetchStatus.IDLE, repr=False)

    def begin(self) -> None:
        if self.status != FetchStatus.LOADING:
            self._resume_status = self.status
        self.loading = True
        self.status = FetchStatus.LOADING

    def succeed(self, data: Any) -> None:
        self.data = data
        self.error = None
        self.loading = False
        self.status = FetchStatus.SUCCESS

    def fail(self, error: BaseException) -> None:
        self.error = error
        self.loading = False
        self.status = FetchStatus.FAILED

    def settle_cancelled(self) -> None:
        self.loading = False
        if self.status == FetchStatus.LOADING:
            self.status = self._resume_status

    def snapshot(self) -> "FetchState[T]":
        return replace(self)
