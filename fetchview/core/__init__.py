"""Core Layer — pure state, pagination math and merge rules. No IO, no async.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic (request id generation aside)

Design Decisions:
    - Functional core separated from the async shell that drives it
"""
