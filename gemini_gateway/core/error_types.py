"""Error type enumeration for the gateway.

Values follow the OpenAI error ``type`` vocabulary so that clients written
against the OpenAI API can branch on them unchanged.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type categories used in error response bodies and SSE error events."""

    # Client errors
    INVALID_REQUEST = "invalid_request_error"
    AUTHENTICATION = "authentication_error"
    PERMISSION = "permission_error"
    NOT_FOUND = "not_found_error"
    RATE_LIMIT = "rate_limit_error"

    # Upstream errors
    API_ERROR = "api_error"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_TIMEOUT = "upstream_timeout"

    # Gateway errors
    SERVICE_UNAVAILABLE = "service_unavailable"
    INTERNAL_ERROR = "internal_error"

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorType":
        """Best-effort error type for an HTTP status code."""
        if status_code in (400, 422):
            return cls.INVALID_REQUEST
        if status_code == 401:
            return cls.AUTHENTICATION
        if status_code == 403:
            return cls.PERMISSION
        if status_code == 404:
            return cls.NOT_FOUND
        if status_code == 429:
            return cls.RATE_LIMIT
        if status_code == 503:
            return cls.SERVICE_UNAVAILABLE
        if status_code == 504:
            return cls.UPSTREAM_TIMEOUT
        return cls.API_ERROR
