"""Pydantic Schemas — arguments passed to caller fetch functions and their results.

Invariants:
    - Schemas validate at the caller boundary (query fetch functions)
"""
