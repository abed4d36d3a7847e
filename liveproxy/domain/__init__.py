"""
Domain Model Module
"""

from liveproxy.domain.policy import DEFAULT_POLICY, ProxyPolicy
from liveproxy.domain.request import InboundRequest, ProxyResponse, UpstreamResponse

__all__ = [
    "DEFAULT_POLICY",
    "ProxyPolicy",
    "InboundRequest",
    "ProxyResponse",
    "UpstreamResponse",
]
