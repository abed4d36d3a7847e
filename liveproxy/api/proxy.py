"""
Proxy API

Catch-all route: ``/<percent-encoded target URL>`` for every method.
"""

from typing import AsyncIterator, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from liveproxy.api.deps import resolve_proxy_service
from liveproxy.common.headers import to_raw_headers
from liveproxy.domain.request import InboundRequest, ProxyResponse

router = APIRouter(tags=["Proxy"])


class RelayResponse(StreamingResponse):
    """
    StreamingResponse that always releases the upstream connection

    ``close`` is awaited however the response ends, including a caller that
    goes away mid-stream.
    """

    def __init__(
        self,
        content: AsyncIterator[bytes],
        close: Optional[Callable[[], Awaitable[None]]] = None,
        **kwargs,
    ):
        super().__init__(content, **kwargs)
        self.release = close

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            if self.release is not None:
                await self.release()


def _raw_path(request: Request) -> bytes:
    """
    Request path as the caller sent it

    ASGI servers hand us the decoded ``path``; the target must be decoded exactly
    once, so the undecoded ``raw_path`` is preferred when the server provides it.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path
    return quote(request.scope.get("path", "/"), safe="/").encode("ascii")


def _request_body(request: Request) -> Optional[AsyncIterator[bytes]]:
    """Stream the caller's body only when one was declared"""
    if "transfer-encoding" in request.headers:
        return request.stream()
    content_length = request.headers.get("content-length", "").strip()
    if content_length and content_length != "0":
        return request.stream()
    return None


def build_inbound_request(request: Request) -> InboundRequest:
    """Build the pipeline's view of a FastAPI request"""
    return InboundRequest(
        method=request.method,
        raw_path=_raw_path(request),
        headers=httpx.Headers(request.headers.raw),
        service_host=request.headers.get("host") or request.url.netloc,
        body=_request_body(request),
    )


def to_fastapi_response(proxy_response: ProxyResponse) -> Response:
    """
    Convert a ProxyResponse into a Starlette response

    Relayed bodies are streamed chunk by chunk; the upstream connection is
    closed once the response is over, even if the caller disconnects.
    """
    if not proxy_response.is_stream:
        response = Response(content=proxy_response.body, status_code=proxy_response.status_code)
        response.raw_headers = to_raw_headers(proxy_response.headers) + [
            (b"content-length", str(len(proxy_response.body)).encode("ascii")),
        ]
        return response

    close = proxy_response.close

    async def relay() -> AsyncIterator[bytes]:
        try:
            async for chunk in proxy_response.body:
                yield chunk
        finally:
            # Release the connection as soon as the body ends
            if close is not None:
                await close()

    response = RelayResponse(relay(), close=close, status_code=proxy_response.status_code)
    response.raw_headers = to_raw_headers(proxy_response.headers)
    return response


async def proxy(request: Request) -> Response:
    """
    Proxy a request to the target URL encoded in the path

    An empty path renders the configuration page.
    """
    service = resolve_proxy_service(request)
    proxy_response = await service.handle(build_inbound_request(request))
    return to_fastapi_response(proxy_response)


# Plain Starlette route with an empty method set: the method is never checked,
# so extension methods (PROPFIND, PURGE, REPORT, ...) are relayed too.
# methods=None would default a function endpoint to GET only.
router.add_route("/{target_path:path}", proxy, methods=[], include_in_schema=False)
