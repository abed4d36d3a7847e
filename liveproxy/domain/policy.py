"""
Proxy Policy Tables

Static configuration data consumed by the classifier and the header policy.
Components receive a ProxyPolicy at construction time so tests can substitute
their own tables.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Pattern


# Mimics Safari on iOS 17.5; some origins reject clients they do not recognise.
# Caller headers override these (except the excluded ones).
DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({
    "User-Agent": (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.5 Mobile/15E148 Safari/604.1"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    "Accept-Encoding": "gzip, deflate, br",
})

# Lower-cased name prefixes never forwarded upstream.
# cf-/x-forwarded-: platform routing metadata; host: computed from the target URL.
EXCLUDED_HEADER_PREFIXES: tuple[str, ...] = (
    "cf-",
    "x-forwarded-",
    "host",
)

# Ordered; a search hit anywhere in the URL marks the request as streaming.
# The bare words are intentionally broad ("livestock" counts as live).
STREAMING_URL_PATTERNS: tuple[Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"rtmps?://",
        r"\.flv$",
        r"\.m3u8$",
        r"\.ts$",
        r"\.mp4$",
        r"\.webm$",
        r"hls",
        r"dash",
        r"stream",
        r"live",
        r"broadcast",
    )
)

STREAMING_CONTENT_TYPES: tuple[str, ...] = (
    "video/",
    "application/x-rtmp",
    "application/vnd.apple.mpegurl",
)


@dataclass(frozen=True)
class ProxyPolicy:
    """
    Proxy Policy

    Immutable bundle of the tables that drive classification and header building.
    """

    default_headers: Mapping[str, str] = field(default_factory=lambda: DEFAULT_HEADERS)
    excluded_header_prefixes: tuple[str, ...] = EXCLUDED_HEADER_PREFIXES
    streaming_url_patterns: tuple[Pattern[str], ...] = STREAMING_URL_PATTERNS
    streaming_content_types: tuple[str, ...] = STREAMING_CONTENT_TYPES

    def is_excluded_header(self, name: str) -> bool:
        """Whether a caller header must not be forwarded upstream"""
        lower = name.lower()
        return any(lower.startswith(prefix) for prefix in self.excluded_header_prefixes)


DEFAULT_POLICY = ProxyPolicy()
