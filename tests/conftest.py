"""
Test Configuration Module
"""

from typing import Any, AsyncIterator, Callable, Optional

import httpx
import pytest

from liveproxy.common.http_client import UpstreamClient
from liveproxy.domain.request import InboundRequest


async def _aiter(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


def _stream_response(
    status_code: int = 200,
    headers: Optional[Any] = None,
    chunks: Optional[list[bytes]] = None,
) -> httpx.Response:
    """
    Build a mock upstream response with an unread streaming body

    Responses built from plain bytes are read eagerly by httpx, which would leave
    nothing for aiter_raw() to relay.
    """
    return httpx.Response(status_code, headers=headers or {}, content=_aiter(chunks or []))


async def _collect(body: AsyncIterator[bytes]) -> bytes:
    return b"".join([chunk async for chunk in body])


class _TrackedStream(httpx.AsyncByteStream):
    """Upstream body stream that counts how often it was closed"""

    def __init__(self, chunks: list[bytes]):
        self.chunks = chunks
        self.close_count = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk

    async def aclose(self) -> None:
        self.close_count += 1

    @property
    def closed(self) -> bool:
        return self.close_count > 0


@pytest.fixture
def stream_response():
    """Builder for mock upstream responses with a streaming body"""
    return _stream_response


@pytest.fixture
def collect():
    """Reads a relayed body stream to the end"""
    return _collect


@pytest.fixture
def tracked_stream():
    """Builder for upstream bodies that record being closed"""
    return _TrackedStream


@pytest.fixture
def make_inbound() -> Callable[..., InboundRequest]:
    """Factory for pipeline requests"""

    def _make(
        raw_path: str = "/",
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
        service_host: str = "proxy.test",
        body: Optional[AsyncIterator[bytes]] = None,
    ) -> InboundRequest:
        return InboundRequest(
            method=method,
            raw_path=raw_path,
            headers=httpx.Headers(headers or {}),
            service_host=service_host,
            body=body,
        )

    return _make


@pytest.fixture
def upstream():
    """
    Upstream client backed by httpx.MockTransport

    ``upstream.handler`` decides the response; every request sent is kept in
    ``upstream.requests``.
    """

    class _Upstream:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: _stream_response()

        def _dispatch(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.handler(request)

        def client(self) -> UpstreamClient:
            return UpstreamClient(transport=httpx.MockTransport(self._dispatch))

    return _Upstream()
