"""
Service Layer Module Initialization
"""

from liveproxy.services.classifier import StreamingClassifier
from liveproxy.services.cors import CorsDecorator
from liveproxy.services.header_policy import HeaderPolicy
from liveproxy.services.proxy_service import ProxyService, build_error_response
from liveproxy.services.redirect import RedirectRewriter
from liveproxy.services.response_shaper import ResponseShaper

__all__ = [
    "StreamingClassifier",
    "CorsDecorator",
    "HeaderPolicy",
    "ProxyService",
    "build_error_response",
    "RedirectRewriter",
    "ResponseShaper",
]
