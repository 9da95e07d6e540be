"""fetchview — asynchronous fetch-lifecycle controllers for resource views.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Docstring-only __init__.py: callers import from the defining module
"""
