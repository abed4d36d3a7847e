"""
Proxy Service Unit Tests
"""

from unittest.mock import AsyncMock
from urllib.parse import quote

import pytest

from liveproxy.common.errors import UpstreamError
from liveproxy.services.proxy_service import ProxyService


def _path(url: str) -> str:
    return "/" + quote(url, safe="-_.!~*'()")


@pytest.mark.asyncio
async def test_empty_path_renders_config_page(make_inbound):
    client = AsyncMock()
    service = ProxyService(client=client)

    response = await service.handle(make_inbound("/", method="POST", headers={"Content-Type": "video/mp4"}))

    assert response.status_code == 200
    assert response.headers["content-type"] == "text/html; charset=utf-8"
    assert response.headers["access-control-allow-origin"] == "*"
    assert b"proxy.test" in response.body
    assert response.is_stream is False
    client.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_streaming_response_relayed(make_inbound, upstream, stream_response, collect):
    upstream.handler = lambda request: stream_response(
        200,
        headers={"Content-Type": "application/json", "Cache-Control": "max-age=60"},
        chunks=[b'{"ok":', b"true}"],
    )
    service = ProxyService(client=upstream.client())

    response = await service.handle(
        make_inbound(_path("https://api.example.test/v1/items"), headers={"User-Agent": "caller-agent"})
    )

    assert response.status_code == 200
    assert response.is_stream is True
    assert response.headers["cache-control"] == "max-age=60"
    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-max-age" not in response.headers
    assert await collect(response.body) == b'{"ok":true}'
    await response.close()

    sent = upstream.requests[0]
    assert str(sent.url) == "https://api.example.test/v1/items"
    assert sent.headers["user-agent"] == "caller-agent"


@pytest.mark.asyncio
async def test_streaming_response_shaped(make_inbound, upstream, stream_response, collect):
    upstream.handler = lambda request: stream_response(
        200,
        headers={"Content-Type": "application/vnd.apple.mpegurl", "Cache-Control": "max-age=600"},
        chunks=[b"#EXTM3U\n"],
    )
    service = ProxyService(client=upstream.client())

    response = await service.handle(make_inbound(_path("https://cdn.test/a.m3u8")))

    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["connection"] == "keep-alive"
    assert response.headers["expires"] == "0"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["access-control-max-age"] == "86400"
    assert await collect(response.body) == b"#EXTM3U\n"
    await response.close()

    sent = upstream.requests[0]
    assert sent.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert sent.headers["pragma"] == "no-cache"


@pytest.mark.asyncio
async def test_streaming_by_request_content_type(make_inbound, upstream, stream_response):
    upstream.handler = lambda request: stream_response(204)
    service = ProxyService(client=upstream.client())

    response = await service.handle(
        make_inbound(_path("https://ingest.example.test/upload"), method="PUT", headers={"Content-Type": "video/mp4"})
    )
    await response.close()

    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert upstream.requests[0].method == "PUT"


@pytest.mark.asyncio
async def test_redirect_rewritten(make_inbound, upstream, stream_response):
    upstream.handler = lambda request: stream_response(302, headers={"Location": "/next"})
    service = ProxyService(client=upstream.client())

    response = await service.handle(make_inbound(_path("https://origin.test/a")))
    await response.close()

    assert response.status_code == 302
    assert response.headers["location"] == "https://proxy.test/" + quote("https://origin.test/next", safe="")
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_streaming_redirect_skips_stream_shaping(make_inbound, upstream, stream_response):
    upstream.handler = lambda request: stream_response(
        302, headers={"Location": "https://edge.test/b.m3u8", "Cache-Control": "max-age=5"}
    )
    service = ProxyService(client=upstream.client())

    response = await service.handle(make_inbound(_path("https://origin.test/live/a.m3u8")))
    await response.close()

    assert response.headers["cache-control"] == "max-age=5"
    assert "accept-ranges" not in response.headers
    assert response.headers["access-control-max-age"] == "86400"


@pytest.mark.asyncio
async def test_redirect_without_location_is_relayed(make_inbound, upstream, stream_response, collect):
    upstream.handler = lambda request: stream_response(302, chunks=[b"moved"])
    service = ProxyService(client=upstream.client())

    response = await service.handle(make_inbound(_path("https://origin.test/a")))

    assert response.status_code == 302
    assert "location" not in response.headers
    assert await collect(response.body) == b"moved"
    await response.close()


@pytest.mark.asyncio
async def test_upstream_error_status_is_forwarded(make_inbound, upstream, stream_response, collect):
    upstream.handler = lambda request: stream_response(
        503, headers={"Retry-After": "10"}, chunks=[b"maintenance"]
    )
    service = ProxyService(client=upstream.client())

    response = await service.handle(make_inbound(_path("https://origin.test/a")))

    assert response.status_code == 503
    assert response.headers["retry-after"] == "10"
    assert response.headers["access-control-allow-origin"] == "*"
    assert await collect(response.body) == b"maintenance"
    await response.close()
    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_transport_failure_becomes_502(make_inbound):
    client = AsyncMock()
    client.send.side_effect = UpstreamError(message="Request error: connection refused")
    service = ProxyService(client=client)

    response = await service.handle(make_inbound(_path("https://down.test/a")))

    assert response.status_code == 502
    assert response.headers["content-type"] == "text/plain; charset=utf-8"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.body == b"Proxy error: Request error: connection refused"
    client.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_malformed_escape_becomes_502(make_inbound):
    client = AsyncMock()
    service = ProxyService(client=client)

    response = await service.handle(make_inbound("/https%3A%2F%2Fx.test%zz"))

    assert response.status_code == 502
    assert response.body.startswith(b"Proxy error: Malformed percent-encoding")
    client.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_relative_target_becomes_502(make_inbound):
    client = AsyncMock()
    service = ProxyService(client=client)

    response = await service.handle(make_inbound("/favicon.ico"))

    assert response.status_code == 502
    assert b"not an absolute URL" in response.body
    client.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_rtmp_target_is_classified_then_fails(make_inbound):
    client = AsyncMock()
    client.send.side_effect = UpstreamError(message="Request error: unsupported protocol")
    service = ProxyService(client=client)

    response = await service.handle(make_inbound(_path("rtmp://x.test/live/k")))

    assert response.status_code == 502
    sent_headers = client.send.await_args.kwargs["headers"]
    assert sent_headers["connection"] == "keep-alive"


@pytest.mark.asyncio
async def test_public_scheme_used_for_redirects(make_inbound, upstream, stream_response):
    upstream.handler = lambda request: stream_response(301, headers={"Location": "/b"})
    service = ProxyService(client=upstream.client(), public_scheme="http")

    response = await service.handle(make_inbound(_path("https://origin.test/a"), service_host="127.0.0.1:8000"))
    await response.close()

    assert response.headers["location"].startswith("http://127.0.0.1:8000/https%3A%2F%2F")


@pytest.mark.asyncio
async def test_inbound_headers_not_mutated(make_inbound, upstream, stream_response):
    upstream.handler = lambda request: stream_response(200)
    service = ProxyService(client=upstream.client())
    inbound = make_inbound(
        _path("https://cdn.test/a.flv"),
        headers={"X-Forwarded-For": "1.1.1.1", "Cf-Connecting-IP": "1.1.1.1"},
    )

    response = await service.handle(inbound)
    await response.close()

    assert inbound.headers["x-forwarded-for"] == "1.1.1.1"
    assert "cache-control" not in inbound.headers
    sent = upstream.requests[0]
    assert "x-forwarded-for" not in sent.headers
    assert "cf-connecting-ip" not in sent.headers
