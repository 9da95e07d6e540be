"""Infrastructure Layer — HTTP transport, cancelable handles, provider, logging.

Invariants:
    - Infrastructure never imports from services/
    - All transport failures mapped to TransportError (core/errors.py)

Design Decisions:
    - Thin wrappers over httpx: controllers only see the Transport protocol
"""
