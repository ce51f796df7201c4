"""
Exception hierarchy for the gateway.

Every error the gateway raises on purpose inherits from GatewayError and
carries the HTTP status and OpenAI error type it should be rendered with.

Example:
    >>> try:
    ...     await balancer.with_retry(model, operation)
    ... except GatewayError as e:
    ...     print(e.status_code, e.error_type, e.message)
"""

from __future__ import annotations

from typing import Any

import httpx

from gemini_gateway.core.error_types import ErrorType


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable message safe to return to the client
        status_code: HTTP status the error maps to
        error_type: OpenAI-style error type
        code: Optional machine-readable code (passed through from upstream)
    """

    default_status_code = 500
    default_error_type = ErrorType.API_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        code: int | str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.error_type = str(
            error_type if error_type is not None else self.default_error_type.value
        )
        self.code = code
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r}, error_type={self.error_type!r})"
        )


class InvalidRequestError(GatewayError):
    """Raised when a client request is missing required fields or is malformed."""

    default_status_code = 400
    default_error_type = ErrorType.INVALID_REQUEST


class AuthenticationError(GatewayError):
    """Raised when the client did not present a valid proxy API key."""

    default_status_code = 401
    default_error_type = ErrorType.AUTHENTICATION


class NoApiKeysConfiguredError(GatewayError):
    """Raised when an upstream call is attempted with an empty credential pool."""

    default_status_code = 503
    default_error_type = ErrorType.SERVICE_UNAVAILABLE

    def __init__(self, message: str = "No upstream API keys configured") -> None:
        super().__init__(message)


class UpstreamError(GatewayError):
    """Raised when the upstream API answers with an error status.

    Only the upstream ``error.message``/``error.type``/``error.code`` fields
    are kept; the raw body is available on ``body`` for logging.
    """

    default_status_code = 502
    default_error_type = ErrorType.UPSTREAM_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        code: int | str | None = None,
        body: str = "",
    ) -> None:
        self.body = body
        super().__init__(message, status_code=status_code, error_type=error_type, code=code)

    @property
    def is_retryable(self) -> bool:
        """Whether another credential might succeed where this one failed."""
        return self.status_code in (401, 403, 429) or self.status_code >= 500

    @classmethod
    def from_response(cls, response: httpx.Response) -> UpstreamError:
        """Build an UpstreamError from an already-read httpx response."""
        text = response.text
        error: dict[str, Any] = {}
        try:
            payload = response.json()
        except ValueError:
            payload = None

        # Google endpoints sometimes wrap the error object in a one-element list
        if isinstance(payload, list) and payload:
            payload = payload[0]
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]

        status_code = response.status_code
        message = error.get("message") or response.reason_phrase or f"HTTP {status_code}"
        error_type = error.get("type") or ErrorType.from_status(status_code).value

        return cls(
            str(message),
            status_code=status_code,
            error_type=str(error_type),
            code=error.get("code"),
            body=text,
        )


class ApiKeysExhaustedError(GatewayError):
    """Raised when every API key in the pool was already tried for a call."""

    default_status_code = 429
    default_error_type = ErrorType.RATE_LIMIT
