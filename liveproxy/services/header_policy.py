"""
Header Policy

Builds the header set sent to the target.
"""

import logging
from collections.abc import Mapping

import httpx

from liveproxy.domain.policy import DEFAULT_POLICY, ProxyPolicy

logger = logging.getLogger(__name__)

# Forced on outbound streaming requests, replacing defaults and caller values
STREAMING_REQUEST_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Connection": "keep-alive",
}


class HeaderPolicy:
    """
    Outbound Header Builder

    Layers, later wins per header name:
    1. policy default headers
    2. caller headers, minus excluded prefixes (cf-*, x-forwarded-*, host)
    3. streaming overrides
    """

    def __init__(self, policy: ProxyPolicy = DEFAULT_POLICY):
        self.policy = policy

    def build_outbound_headers(
        self,
        inbound_headers: Mapping[str, str],
        is_streaming: bool,
    ) -> httpx.Headers:
        """
        Build outbound request headers

        Args:
            inbound_headers: Caller request headers (never modified)
            is_streaming: Streaming verdict for the request

        Returns:
            httpx.Headers: New header set owned by the outbound request
        """
        outbound = httpx.Headers(dict(self.policy.default_headers))

        items = (
            inbound_headers.multi_items()
            if isinstance(inbound_headers, httpx.Headers)
            else inbound_headers.items()
        )
        skipped = []
        for key, value in items:
            if self.policy.is_excluded_header(key):
                skipped.append(key)
                continue
            outbound[key] = value

        if skipped:
            logger.debug("Dropped caller headers: %s", ", ".join(skipped))

        if is_streaming:
            for key, value in STREAMING_REQUEST_HEADERS.items():
                outbound[key] = value

        return outbound
