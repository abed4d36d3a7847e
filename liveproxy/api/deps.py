"""
API Dependency Injection Module

Provides the dependencies required by the proxy route.
"""

from fastapi import Request

from liveproxy.common.http_client import UpstreamClient
from liveproxy.config import get_settings
from liveproxy.services import ProxyService


def get_upstream_client() -> UpstreamClient:
    """Upstream client configured from settings"""
    settings = get_settings()
    return UpstreamClient(
        timeout=settings.HTTP_TIMEOUT,
        connect_timeout=settings.HTTP_CONNECT_TIMEOUT,
    )


def get_proxy_service(client: UpstreamClient) -> ProxyService:
    """Proxy service for one request"""
    settings = get_settings()
    return ProxyService(client=client, public_scheme=settings.PUBLIC_SCHEME)


def resolve_proxy_service(request: Request) -> ProxyService:
    """
    Proxy service for the catch-all route

    The route is a plain Starlette route (so it accepts every method) and does
    not go through ``Depends``; ``app.dependency_overrides`` is still honoured
    for the upstream client.
    """
    overrides = request.app.dependency_overrides
    client_factory = overrides.get(get_upstream_client, get_upstream_client)
    return get_proxy_service(client_factory())
