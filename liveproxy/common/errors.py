"""
Error Definitions

Defines the exceptions raised while turning a caller request into an upstream fetch.
Every one of them is terminal for its request and is reported to the caller as a
plain-text 502 response.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format (for logging and JSON consumers)

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class TargetDecodeError(AppError):
    """
    Target Decode Error

    Raised when the request path carries malformed percent-escapes.
    """

    def __init__(
        self,
        message: str = "Malformed percent-encoding in target URL",
        code: str = "invalid_target_encoding",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="target_error",
            code=code,
            details=details,
            status_code=502,
        )


class InvalidTargetError(AppError):
    """
    Invalid Target Error

    Raised when the decoded target is not an absolute URL.
    """

    def __init__(
        self,
        message: str = "Invalid target URL",
        code: str = "invalid_target_url",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="target_error",
            code=code,
            details=details,
            status_code=502,
        )


class UpstreamError(AppError):
    """
    Upstream Transport Error

    Raised when the target could not be reached at all (DNS, connect, TLS,
    unsupported scheme). HTTP error statuses from the target are not errors.
    """

    def __init__(
        self,
        message: str = "Upstream service error",
        code: str = "upstream_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            error_type="upstream_error",
            code=code,
            details=details,
            status_code=status_code,
        )


class UpstreamTimeoutError(UpstreamError):
    """Raised when a configured upstream timeout expires before response headers arrive"""

    def __init__(
        self,
        message: str = "Upstream request timed out",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="upstream_timeout", details=details)
