"""
API Module Initialization
"""

from liveproxy.api.proxy import router as proxy_router

__all__ = [
    "proxy_router",
]
