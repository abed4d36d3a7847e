"""
Request/Response Domain Model

Request-scoped entities passed between the proxy pipeline stages.
None of them outlives the request that created it.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Optional, Union

import httpx


@dataclass
class InboundRequest:
    """
    Inbound Request Data Class

    What the caller sent to the proxy.
    """

    # HTTP Method
    method: str
    # Raw request path, still percent-encoded (carries the target URL)
    raw_path: Union[str, bytes]
    # Request Headers (case-insensitive multimap)
    headers: httpx.Headers
    # Host the caller used to reach this service, port included when present
    service_host: str
    # Request Body stream, None when the caller sent no body
    body: Optional[AsyncIterator[bytes]] = None

    @property
    def content_type(self) -> str:
        """Declared request content type, empty when absent"""
        return self.headers.get("content-type", "")


@dataclass
class UpstreamResponse:
    """
    Upstream Response Data Class

    Response headers from the target plus its still-unread body.
    """

    # HTTP Status Code
    status_code: int
    # Reason phrase sent by the target
    reason_phrase: str
    # Response Headers
    headers: httpx.Headers
    # Raw (undecoded) body chunks
    body: AsyncIterator[bytes]
    # Releases the upstream connection
    close: Callable[[], Awaitable[None]]


@dataclass
class ProxyResponse:
    """
    Proxy Response Data Class

    What the proxy returns to the caller.
    """

    # HTTP Status Code
    status_code: int
    # Response Headers
    headers: httpx.Headers
    # bytes for locally produced responses, the upstream stream otherwise
    body: Union[bytes, AsyncIterator[bytes]] = b""
    # Reason phrase, informational only (ASGI servers derive their own)
    reason_phrase: str = ""
    # Releases the upstream connection once the body has been relayed
    close: Optional[Callable[[], Awaitable[None]]] = None

    @property
    def is_stream(self) -> bool:
        """Whether the body is relayed from upstream rather than produced locally"""
        return not isinstance(self.body, bytes)
