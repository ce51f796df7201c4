"""Error translation for API endpoints.

Every failure leaving the gateway is rendered as an OpenAI-style body:

    {"error": {"message": "...", "type": "...", "code": ...}}

Upstream details are only exposed through the parsed upstream error message;
unexpected local errors are logged and replaced by a generic message.
"""

import logging
from typing import Any

import httpx
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_gateway.core.error_types import ErrorType
from gemini_gateway.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_body(message: str, error_type: str, code: int | str | None = None) -> dict[str, Any]:
    return {"error": {"message": message, "type": error_type, "code": code}}


def build_error_payload(error: BaseException) -> tuple[int, dict[str, Any]]:
    """Translate an exception into an HTTP status and error body.

    Args:
        error: Anything raised while serving a request

    Returns:
        Tuple of (status_code, body).
    """
    if isinstance(error, GatewayError):
        return error.status_code, error_body(error.message, error.error_type, error.code)

    if isinstance(error, httpx.TimeoutException):
        return 504, error_body(
            "Upstream request timed out. Consider increasing REQUEST_TIMEOUT.",
            ErrorType.UPSTREAM_TIMEOUT.value,
        )

    if isinstance(error, httpx.HTTPError):
        return 502, error_body(
            f"Upstream service error: {error}" if str(error) else "Upstream service error",
            ErrorType.UPSTREAM_ERROR.value,
        )

    if isinstance(error, StarletteHTTPException):
        message = error.detail if isinstance(error.detail, str) else str(error.detail)
        return error.status_code, error_body(
            message, ErrorType.from_status(error.status_code).value
        )

    return 500, error_body(INTERNAL_ERROR_MESSAGE, ErrorType.INTERNAL_ERROR.value)


def error_response(error: BaseException, *, context: str | None = None) -> JSONResponse:
    """Log ``error`` and build the JSONResponse returned to the client.

    Unexpected errors are logged with their traceback; gateway and upstream
    errors get a single line.
    """
    status_code, body = build_error_payload(error)
    where = f" while {context}" if context else ""

    if status_code >= 500 and not isinstance(error, GatewayError | httpx.HTTPError):
        logger.error(f"Unexpected error{where}: {error!r}", exc_info=error)
    else:
        logger.warning(f"Request failed{where}: {status_code} {body['error']['message']}")

    return JSONResponse(status_code=status_code, content=body)


def invalid_request_response(message: str) -> JSONResponse:
    """Build a 400 response for a request body the gateway could not accept."""
    return JSONResponse(
        status_code=400,
        content=error_body(message, ErrorType.INVALID_REQUEST.value),
    )
