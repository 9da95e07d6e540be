"""HTTP Transport — wraps httpx.AsyncClient with cancelable handles and error mapping.

Invariants:
    - request() returns immediately with a CancelableRequest; IO happens in its task
    - Every in-flight request registered under its request_id until it settles
    - HTTP status >= 400, timeouts and connection failures mapped to TransportError
    - No retries: retry/backoff is not a concern of this layer

Design Decisions:
    - Wrapper over raw client: isolates error mapping from controllers (single responsibility)
    - GET sends params as query string, every other method as a JSON body
"""

import logging
from typing import Any

import httpx

from fetchview.core.domain_types import RequestId, new_request_id
from fetchview.core.errors import ErrorContext, TransportError
from fetchview.infrastructure.cancelable import CancelableRequest

logger = logging.getLogger(__name__)


class HttpTransport:
    """Transport protocol implementation backed by httpx."""

    def __init__(
        self,
        base_url: str = "",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )
        self._in_flight: dict[RequestId, CancelableRequest] = {}

    def request(
        self,
        endpoint: str,
        params: Any = None,
        *,
        request_id: RequestId | None = None,
        method: str = "GET",
    ) -> CancelableRequest:
        """Start a request and register its cancelable handle."""
        rid = request_id or new_request_id()
        handle = CancelableRequest(
            self._send(method, endpoint, params, rid), request_id=rid,
        )
        self._in_flight[rid] = handle
        handle.add_done_callback(lambda h: self._forget(rid, h))
        return handle

    def get(
        self, endpoint: str, params: Any = None, *, request_id: RequestId | None = None,
    ) -> CancelableRequest:
        return self.request(endpoint, params, request_id=request_id)

    def lookup_cancelable(self, request_id: RequestId) -> CancelableRequest | None:
        return self._in_flight.get(request_id)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def aclose(self) -> None:
        for handle in list(self._in_flight.values()):
            handle.cancel()
        self._in_flight.clear()
        await self.client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _send(
        self, method: str, endpoint: str, params: Any, request_id: RequestId,
    ) -> Any:
        ctx = ErrorContext(request_id=request_id, endpoint=endpoint)
        try:
            if method.upper() == "GET":
                response = await self.client.request(method, endpoint, params=params)
            else:
                response = await self.client.request(method, endpoint, json=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(
                "HTTP %s from %s", status, endpoint,
                extra={"request_id": request_id, "status_code": status},
            )
            raise TransportError(
                f"HTTP {status} for {method.upper()} {endpoint}",
                status_code=status, context=ctx,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {endpoint} timed out", context=ctx,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Connection error for {endpoint}: {e}", context=ctx,
            ) from e

        logger.debug(
            "HTTP success", extra={"request_id": request_id, "endpoint": endpoint},
        )
        return self._decode(response)

    def _forget(self, request_id: RequestId, handle: CancelableRequest) -> None:
        if self._in_flight.get(request_id) is handle:
            del self._in_flight[request_id]

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        if "json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text
