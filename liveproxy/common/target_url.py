"""
Target URL Codec

The target of a proxied request travels percent-encoded in the request path:
``/<encodeURIComponent(target)>``. This module extracts, validates and builds
such paths.
"""

import re
from typing import Union
from urllib.parse import quote, unquote_to_bytes, urlsplit

from liveproxy.common.errors import InvalidTargetError, TargetDecodeError

# Characters encodeURIComponent leaves untouched besides ASCII alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

# A '%' that does not start a two-digit hex escape
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def extract_target_url(raw_path: Union[str, bytes]) -> str:
    """
    Extract the target URL from a raw (still percent-encoded) request path

    Strips the query component and the leading slash, then percent-decodes
    exactly once. An empty result means no target was given.

    Args:
        raw_path: Request path as received, e.g. ``/https%3A%2F%2Fexample.com%2F``

    Returns:
        str: Decoded target URL, possibly empty

    Raises:
        TargetDecodeError: Malformed escapes or bytes that are not valid UTF-8
    """
    if isinstance(raw_path, bytes):
        try:
            raw_path = raw_path.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TargetDecodeError(details={"reason": str(e)}) from e

    path = raw_path.split("?", 1)[0]
    if path.startswith("/"):
        path = path[1:]

    match = _MALFORMED_ESCAPE.search(path)
    if match:
        raise TargetDecodeError(
            message=f"Malformed percent-encoding at offset {match.start()} in target URL",
            details={"path": path},
        )

    try:
        return unquote_to_bytes(path).decode("utf-8")
    except UnicodeDecodeError as e:
        raise TargetDecodeError(
            message="Percent-encoded target URL is not valid UTF-8",
            details={"path": path},
        ) from e


def validate_target_url(url: str) -> str:
    """
    Ensure the decoded target is an absolute URL

    Only syntax is checked; whether the scheme can actually be fetched is left
    to the upstream client (an ``rtmp://`` target fails there).

    Raises:
        InvalidTargetError: Missing scheme or network location
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidTargetError(message=f"Invalid target URL: {e}", details={"url": url}) from e

    if not parts.scheme or not parts.netloc:
        raise InvalidTargetError(
            message=f"Target is not an absolute URL: {url}",
            details={"url": url},
        )
    return url


def encode_target_url(url: str) -> str:
    """Percent-encode a URL the way JavaScript's encodeURIComponent does"""
    return quote(url, safe=_URI_COMPONENT_SAFE)


def build_proxy_url(target_url: str, service_host: str, scheme: str = "https") -> str:
    """
    Build the proxied form of a target URL

    Examples:
        >>> build_proxy_url("https://origin.test/next", "proxy.test")
        'https://proxy.test/https%3A%2F%2Forigin.test%2Fnext'
    """
    return f"{scheme}://{service_host}/{encode_target_url(target_url)}"
