"""
CORS Decorator

Permissive cross-origin headers for browser players on any origin.
"""

import httpx

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, HEAD",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Expose-Headers": "*",
}

STREAMING_CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Max-Age": "86400",
}


class CorsDecorator:
    """Adds CORS headers to every response the proxy returns"""

    def decorate(self, headers: httpx.Headers, is_streaming: bool) -> httpx.Headers:
        """
        Return a copy of ``headers`` with CORS headers set

        Values overwrite existing ones, so decorating twice changes nothing.
        """
        decorated = httpx.Headers(headers)
        for key, value in CORS_HEADERS.items():
            decorated[key] = value
        if is_streaming:
            for key, value in STREAMING_CORS_HEADERS.items():
                decorated[key] = value
        return decorated
