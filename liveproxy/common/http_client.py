"""
HTTP Client Wrapper Module

Provides the asynchronous HTTP client used to reach proxy targets.
Redirects are never followed here: 3xx responses come back to the caller so the
Location header can be rewritten to keep later hops inside the proxy.
"""

import logging
import time
from typing import AsyncIterator, Optional

import httpx

from liveproxy.common.errors import UpstreamError, UpstreamTimeoutError
from liveproxy.common.headers import sanitize_headers
from liveproxy.domain.request import UpstreamResponse

logger = logging.getLogger(__name__)


class UpstreamClient:
    """
    Upstream HTTP Client

    Wraps httpx.AsyncClient. Each request gets its own client so no cookies or
    other state leak between callers. The response is returned as soon as its
    headers arrive; the body is left on the wire for the caller to stream.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Upstream Client

        Args:
            timeout: Overall timeout (seconds), None for no limit
            connect_timeout: Connect timeout (seconds), defaults to ``timeout``
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.transport = transport

    def _build_timeout(self) -> httpx.Timeout:
        if self.connect_timeout is None:
            return httpx.Timeout(self.timeout)
        return httpx.Timeout(self.timeout, connect=self.connect_timeout)

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._build_timeout(),
            follow_redirects=False,
            transport=self.transport,
        )

    async def send(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        body: Optional[AsyncIterator[bytes]] = None,
    ) -> UpstreamResponse:
        """
        Send a request to the target and wait for its response headers

        Args:
            method: HTTP method
            url: Absolute target URL
            headers: Outbound request headers
            body: Request body stream, None for no body

        Returns:
            UpstreamResponse: Status, headers and the unread raw body

        Raises:
            UpstreamTimeoutError: A configured timeout expired
            UpstreamError: The target could not be reached
        """
        logger.debug(
            "Upstream Request: method=%s url=%s headers=%s",
            method,
            url,
            sanitize_headers(headers),
        )

        client = self._create_client()
        started = time.perf_counter()
        try:
            request = client.build_request(method, url, headers=headers, content=body)
            response = await client.send(request, stream=True)
        except httpx.TimeoutException as e:
            await client.aclose()
            raise UpstreamTimeoutError(
                message=f"Request timeout: {str(e) or type(e).__name__}",
                details={"url": url},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            await client.aclose()
            raise UpstreamError(
                message=f"Request error: {str(e) or type(e).__name__}",
                details={"url": url},
            ) from e
        except BaseException:
            await client.aclose()
            raise

        logger.debug(
            "Upstream Response: status=%s url=%s headers_after_ms=%d",
            response.status_code,
            url,
            int((time.perf_counter() - started) * 1000),
        )

        closed = False

        async def close() -> None:
            nonlocal closed
            if closed:
                return
            closed = True
            await response.aclose()
            await client.aclose()

        return UpstreamResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=response.headers,
            body=_relay_raw(response, url),
            close=close,
        )


async def _relay_raw(response: httpx.Response, url: str) -> AsyncIterator[bytes]:
    """
    Yield the raw body bytes (content encoding left intact)

    Status and headers are already sent when this runs, so a transport failure
    mid-body can only end the stream early.
    """
    try:
        async for chunk in response.aiter_raw():
            yield chunk
    except httpx.HTTPError as e:
        logger.warning("Upstream body interrupted: url=%s error=%s", url, e)
