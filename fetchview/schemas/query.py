"""Query Schemas — arguments handed to caller fetch functions and the paginated result.

Invariants:
    - QueryArgs.initial is True only for a controller's first attempt
    - PageResult.total >= 0; incremental defaults to False (replace semantics)
    - PageResult.reset_data=True forces replace even for an incremental page
    - Args are frozen: a fetch function cannot mutate controller state through them

Design Decisions:
    - PageResult validated with model_validate so callers may return a plain dict
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryArgs(BaseModel):
    """Arguments passed to a query controller's fetch function."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request_id: str
    initial: bool
    params: Any = None


class PageQueryArgs(QueryArgs):
    """QueryArgs plus the full pagination state."""
    page_number: int = Field(ge=1)
    page_size: int = Field(gt=0)
    total: int | None = None
    total_pages: int | None = None
    reset_data: bool = False


class PageResult(BaseModel):
    """One page returned by a query-paginated fetch function."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[Any]
    total: int = Field(ge=0)
    incremental: bool = False
    reset_data: bool = False
