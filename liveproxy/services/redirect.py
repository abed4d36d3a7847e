"""
Redirect Rewriter

Rewrites the Location of upstream redirects into proxied URLs so the client
follows the next hop through this service as well.
"""

import logging
from typing import Optional

import httpx

from liveproxy.common.target_url import build_proxy_url

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


class RedirectRewriter:
    """Rewrites Location headers of 3xx responses"""

    def __init__(self, public_scheme: str = "https"):
        self.public_scheme = public_scheme

    def is_redirect(self, status_code: int, headers: httpx.Headers) -> bool:
        """A redirect status without a Location header is handled as a normal response"""
        return status_code in REDIRECT_STATUS_CODES and bool(headers.get("location"))

    def rewrite(
        self,
        status_code: int,
        headers: httpx.Headers,
        target_url: str,
        service_host: str,
    ) -> Optional[httpx.Headers]:
        """
        Rewrite the Location header of a redirect response

        Relative locations are resolved against the target URL, not against the
        URL the caller used. The result is normalised (lower-cased host,
        escaped path) before it is encoded into the proxied URL.

        Args:
            status_code: Upstream status code
            headers: Upstream response headers (not modified)
            target_url: URL that produced the redirect
            service_host: Host the caller used to reach this service

        Returns:
            Optional[httpx.Headers]: Copy of the headers with Location replaced,
                or None when the response is not a rewritable redirect or the
                location cannot be parsed
        """
        if not self.is_redirect(status_code, headers):
            return None

        location = headers["location"]
        try:
            absolute = str(httpx.URL(target_url).join(location))
        except httpx.InvalidURL as e:
            logger.warning("Redirect location not rewritten: location=%s error=%s", location, e)
            return None
        proxied = build_proxy_url(absolute, service_host, scheme=self.public_scheme)

        logger.info("Redirect %s: %s -> %s", status_code, absolute, proxied)

        rewritten = httpx.Headers(headers)
        rewritten["Location"] = proxied
        return rewritten
