"""HTTP transport for gateway requests.

The client only needs ``post(url, form) -> TransportResponse``.  The default
implementation wraps ``httpx.AsyncClient``; tests and alternative stacks can
pass anything with the same ``post`` coroutine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol

import httpx

from .errors import SMSTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes


class Transport(Protocol):
    async def post(self, url: str, form: Mapping[str, str]) -> TransportResponse: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """Form-encoded POSTs through ``httpx.AsyncClient``.

    Args:
        timeout: Request timeout in seconds.
        http_client: Override for testing; when given, the caller owns it.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the underlying HTTP client if we own it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def post(self, url: str, form: Mapping[str, str]) -> TransportResponse:
        """POST *form* as ``application/x-www-form-urlencoded`` (UTF-8).

        Non-2xx responses are returned as-is; the gateway reports business
        errors in the body.

        Raises:
            SMSTransportError: On connection, timeout or protocol errors.
        """
        try:
            response = await self._client.post(url, data=dict(form))
        except httpx.HTTPError as exc:
            logger.error("SMS gateway request failed url=%s error=%s", url, type(exc).__name__)
            raise SMSTransportError(url, str(exc) or type(exc).__name__) from exc
        logger.debug("SMS gateway responded status=%d bytes=%d", response.status_code, len(response.content))
        return TransportResponse(response.status_code, response.content)
