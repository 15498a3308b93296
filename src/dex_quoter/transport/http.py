"""Async HTTP transport for provider calls."""

import asyncio
import logging
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

from dex_quoter.core.models import TransportRequest
from dex_quoter.core.status import TOKEN_ERROR, TOKEN_NETWORK_ERROR, TOKEN_PARSER_ERROR, TOKEN_TIMEOUT

logger = logging.getLogger(__name__)


class TransportSuccess(BaseModel):
    """
    Delivered and decoded response.

    Attributes
    ----------
    status_code : int
        HTTP status
    body : Any
        Decoded JSON body

    """

    status_code: int = 200
    body: Any = None


class TransportFailure(BaseModel):
    """
    Failed transport call.

    Attributes
    ----------
    status_code : int
        HTTP status, 0 when no response was received
    status_token : str
        Transport-level token ('timeout', 'error', 'parsererror', 'network error')
    text : str | None
        Raw response body or error text

    """

    status_code: int = 0
    status_token: str
    text: str | None = None


TransportOutcome = TransportSuccess | TransportFailure


class Transport(Protocol):
    """Interface of the injected transport used by the executors."""

    async def send(self, request: TransportRequest, timeout_ms: int) -> TransportOutcome:
        """Send one request, never raising for HTTP or network failures."""
        ...


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    The timeout bounds the whole call (connect, send, and read together),
    and fires the distinguishable 'timeout' token.

    Parameters
    ----------
    client : httpx.AsyncClient | None
        Shared client, a new one is created (and owned) if None

    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(headers={"Accept": "application/json"})

    async def send(self, request: TransportRequest, timeout_ms: int) -> TransportOutcome:
        """
        Send a transport request.

        Parameters
        ----------
        request : TransportRequest
            Request description
        timeout_ms : int
            Timeout for this call in milliseconds

        Returns
        -------
        TransportOutcome
            Success with decoded JSON body, or failure with status and token

        """
        timeout = timeout_ms / 1000

        try:
            response = await asyncio.wait_for(
                self.client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.body,
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (httpx.TimeoutException, TimeoutError):
            logger.debug("Timeout after %dms: %s %s", timeout_ms, request.method, request.url)
            return TransportFailure(status_token=TOKEN_TIMEOUT)
        except httpx.HTTPError as e:
            logger.debug("Transport error for %s: %s", request.url, e)
            return TransportFailure(status_token=TOKEN_NETWORK_ERROR, text=str(e))

        if not response.is_success:
            return TransportFailure(
                status_code=response.status_code,
                status_token=TOKEN_ERROR,
                text=response.text,
            )

        try:
            body = response.json()
        except ValueError:
            return TransportFailure(
                status_code=response.status_code,
                status_token=TOKEN_PARSER_ERROR,
                text=response.text,
            )

        return TransportSuccess(status_code=response.status_code, body=body)

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object | None) -> None:
        """Async context manager exit."""
        await self.aclose()
