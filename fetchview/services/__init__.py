"""Services Layer — the fetch engine and its controller variants.

Invariants:
    - Every controller publishes state only through FetchEngine._publish
    - One asyncio.Task per fetch attempt, owned by the controller instance

Design Decisions:
    - One file per controller family (transport, paginated, query, query-paginated)
"""
