"""
Header utilities.

Helpers shared by the pipeline stages: masking sensitive values before headers are
logged, and converting header multimaps into the raw ASGI header list.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

# Response framing the ASGI server recomputes for the relayed body.
_SERVER_FRAMED_HEADERS = {
    "transfer-encoding",
}

_SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "x-api-key",
    "api-key",
}


def mask_value(value: str) -> str:
    """
    Mask a credential-like header value, keeping a short prefix/suffix for identification.

    Examples:
        >>> mask_value("Bearer sk-1234567890abcdef")
        'Bearer sk-1***...***ef'
        >>> mask_value("short")
        '***'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.lower().startswith("bearer "):
        prefix = "Bearer "
        token = value[7:]

    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Sanitize headers for logging.

    Returns a new dictionary; the original object is not modified.
    """
    if not headers:
        return {}

    sanitized: dict[str, Any] = {}
    for key, value in headers.items():
        if key.lower() in _SENSITIVE_HEADERS and isinstance(value, str):
            sanitized[key] = mask_value(value)
        else:
            sanitized[key] = value
    return sanitized


def to_raw_headers(headers: httpx.Headers) -> list[tuple[bytes, bytes]]:
    """
    Convert a header multimap into an ASGI raw header list.

    Repeated headers (e.g. Set-Cookie) stay separate entries instead of being
    comma-joined, and framing headers the server recomputes are dropped.
    """
    return [
        (key.lower(), value)
        for key, value in headers.raw
        if key.lower().decode("latin-1") not in _SERVER_FRAMED_HEADERS
    ]
