"""Transport Provider — process-level transport shared by controllers that are not given one.

Invariants:
    - An explicit transport instance wins over base_url
    - on_init runs exactly once per init_transport() call, after registration
    - get_transport() raises ConfigurationError when nothing is registered

Design Decisions:
    - Singleton initialized by the host on startup (no import side effects)
    - Controllers take an explicit transport first; the provider is the fallback
"""

import logging
from typing import Callable

from fetchview.config import get_settings
from fetchview.core.errors import ConfigurationError
from fetchview.core.transport_protocols import Transport
from fetchview.infrastructure.http_transport import HttpTransport

logger = logging.getLogger(__name__)


# Singleton (initialized on startup)
_transport: Transport | None = None


def init_transport(
    base_url: str | None = None,
    *,
    transport: Transport | None = None,
    on_init: Callable[[Transport], object] | None = None,
) -> Transport:
    """Register the shared transport, building an HttpTransport when none is given."""
    global _transport
    if transport is None:
        settings = get_settings()
        transport = HttpTransport(
            base_url=base_url if base_url is not None else settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
    _transport = transport
    logger.info("Transport initialized: %s", type(transport).__name__)
    if on_init is not None:
        on_init(transport)
    return transport


def get_transport() -> Transport:
    if _transport is None:
        raise ConfigurationError(
            "Transport not provided: pass transport= or call init_transport()",
        )
    return _transport


def resolve_transport(transport: Transport | None) -> Transport:
    """Explicit transport if given, otherwise the registered one."""
    return transport if transport is not None else get_transport()


def registered_transport() -> Transport | None:
    return _transport


def reset_transport() -> None:
    global _transport
    _transport = None
