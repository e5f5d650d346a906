import asyncio
import logging
from typing import Dict, Optional

import httpx

from abstractions.transport import Transport, TransportError, TransportResponse
from contracts.probe import FailureKind

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (
    httpx.ConnectError,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)


def decode_body(resp: httpx.Response):
    """Decode a JSON body, keeping the raw text when it is not JSON."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


class HttpxTransport(Transport):
    """
    Transport sending GET requests with httpx, translating every httpx failure
    into a TransportError.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the transport.

        Args:
            client (Optional[httpx.AsyncClient]): Shared client to send requests
                with. When omitted a short-lived client is opened per request.
        """
        self.client = client

    async def send(
        self, url: str, timeout_ms: int, headers: Dict[str, str]
    ) -> TransportResponse:
        if self.client is not None:
            return await self._send(self.client, url, timeout_ms, headers)
        async with httpx.AsyncClient() as client:
            return await self._send(client, url, timeout_ms, headers)

    async def _send(self, client, url, timeout_ms, headers):
        timeout = timeout_ms / 1000.0
        try:
            # httpx timeouts apply per phase, wait_for bounds the whole request
            resp = await asyncio.wait_for(
                client.get(
                    url,
                    headers=headers,
                    timeout=httpx.Timeout(timeout),
                    follow_redirects=True,
                ),
                timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.debug(f"GET {url} timed out after {timeout_ms}ms: {e!r}")
            raise TransportError(FailureKind.TIMEOUT, f"timed out after {timeout_ms}ms") from e
        except _CONNECTION_ERRORS as e:
            logger.debug(f"GET {url} connection failure: {e!r}")
            raise TransportError(FailureKind.CONNECTION_FAILURE, str(e) or type(e).__name__) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"GET {url} failed: {e!r}")
            raise TransportError(FailureKind.OTHER, str(e) or type(e).__name__) from e

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                FailureKind.HTTP_STATUS,
                resp.reason_phrase,
                status_code=resp.status_code,
            )
        return TransportResponse(
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            body=decode_body(resp),
        )
