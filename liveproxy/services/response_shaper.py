"""
Response Shaper

Builds the caller-facing header set for non-redirect responses.
"""

import httpx

STREAMING_RESPONSE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Connection": "keep-alive",
}


class ResponseShaper:
    """
    Streaming responses get cache suppression, keep-alive and range support;
    everything else is copied verbatim.
    """

    def shape(self, upstream_headers: httpx.Headers, is_streaming: bool) -> httpx.Headers:
        shaped = httpx.Headers(upstream_headers)
        if not is_streaming:
            return shaped

        for key, value in STREAMING_RESPONSE_HEADERS.items():
            shaped[key] = value

        # Optimistic: advertised even when the origin is silent about ranges
        if "accept-ranges" not in shaped:
            shaped["Accept-Ranges"] = "bytes"

        return shaped
