"""Domain Types — identifiers and lifecycle enums shared by every controller.

Invariants:
    - RequestId wraps a uuid4 hex string (122 random bits) — never a counter
    - All lifecycle states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize into JSON log records without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import uuid4


# ─── Identity Types ──────────────────────────────────────────────

RequestId = NewType("RequestId", str)


def new_request_id() -> RequestId:
    """Fresh identifier for one fetch attempt."""
    return RequestId(uuid4().hex)


# ─── Enums ───────────────────────────────────────────────────────

class FetchStatus(str, Enum):
    """Fetch state machine states."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class ReentryPolicy(str, Enum):
    """What a trigger does while an attempt is still loading."""
    IGNORE_WHILE_LOADING = "ignore_while_loading"
    SUPERSEDE = "supersede"


# ─── Limits ──────────────────────────────────────────────────────

DEFAULT_PAGE_SIZE: int = 20
FIRST_PAGE: int = 1
