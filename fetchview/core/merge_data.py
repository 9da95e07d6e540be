"""Incremental Merge — append-or-replace rule for accumulated page data.

Invariants:
    - Append only when the response is incremental AND no reset is pending
    - Always returns a new list (published snapshots never alias each other)
"""


def merge_page_data(
    existing: list | None, incoming: list, incremental: bool, reset_pending: bool,
) -> list:
    """Merge one page of results into accumulated data. Pure."""
    if incremental and not reset_pending:
        return [*(existing or []), *incoming]
    return list(incoming)
