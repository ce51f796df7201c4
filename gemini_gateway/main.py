import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_gateway import __version__
from gemini_gateway.api.endpoints import public_router
from gemini_gateway.api.endpoints import router as api_router
from gemini_gateway.api.services.error_handling import (
    build_error_payload,
    error_response,
    invalid_request_response,
)
from gemini_gateway.api.services.key_rotation import KeyBalancer
from gemini_gateway.core.config import Config, config
from gemini_gateway.core.exceptions import GatewayError
from gemini_gateway.core.logging import configure_root_logging, normalize_log_level
from gemini_gateway.core.provider import ApiKeyRotator, UpstreamClientFactory


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request body"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status_code, body = build_error_payload(exc)
    return JSONResponse(status_code=status_code, content=body, headers=exc.headers)


async def _gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return error_response(exc, context=f"{request.method} {request.url.path}")


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return invalid_request_response(_validation_message(exc))


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(exc, context=f"{request.method} {request.url.path}")


def create_app(app_config: Config | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_config: Configuration to serve with; defaults to the process-wide one.
    """
    app_config = app_config or config

    app = FastAPI(title="Gemini OpenAI Gateway", version=__version__)
    app.state.config = app_config
    app.state.key_balancer = KeyBalancer(
        ApiKeyRotator(app_config.api_keys, cooldown_seconds=app_config.key_cooldown_seconds),
        max_retries=app_config.max_retries,
    )
    app.state.client_factory = UpstreamClientFactory(
        base_url=app_config.base_url,
        timeout=app_config.request_timeout,
    )

    app.add_exception_handler(GatewayError, _gateway_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    app.include_router(public_router)
    app.include_router(api_router)
    return app


configure_root_logging(config.log_level)

app = create_app()


def main() -> None:
    if len(sys.argv) > 1 and sys.argv[1] == "--help":
        print(f"Gemini OpenAI Gateway v{__version__}")
        print("")
        print("Usage: python -m gemini_gateway.main")
        print("       or: gemgate start")
        print("")
        print("Required environment variables:")
        print("  GEMINI_API_KEYS - Comma separated Gemini API keys")
        print("                    (or GEMINI_API_KEY for a single key)")
        print("")
        print("Optional environment variables:")
        print("  PROXY_API_KEY - If set, clients must present this exact key")
        print("  GEMINI_BASE_URL - Upstream OpenAI-compatible base URL")
        print("  HOST - Server host (default: 0.0.0.0)")
        print("  PORT - Server port (default: 8082)")
        print("  LOG_LEVEL - Logging level (default: INFO)")
        print("  REQUEST_TIMEOUT - Request timeout in seconds (default: 90)")
        print("  MAX_RETRIES - Extra attempts with other keys (default: 3)")
        print("  KEY_COOLDOWN_SECONDS - Base cooldown after a key failure (default: 60)")
        print("")
        print("For more options, use the gemgate CLI:")
        print("  gemgate config show     - Show current configuration")
        print("  gemgate config validate - Validate environment variables")
        sys.exit(0)

    # Configuration summary
    print(f"🚀 Gemini OpenAI Gateway v{__version__}")
    print("✅ Configuration loaded successfully")
    print(f"   API Keys: {len(config.api_keys)} ({', '.join(config.api_key_hashes) or 'none'})")
    print(f"   Base URL: {config.base_url}")
    print(f"   Request Timeout : {config.request_timeout}s")
    print(f"   Max Retries     : {config.max_retries}")
    print(f"   Server: {config.host}:{config.port}")
    print(f"   Client API Key Validation: {'Enabled' if config.proxy_api_key else 'Disabled'}")
    print("")

    if not config.api_keys:
        print("⚠️  No Gemini API keys configured; upstream calls will fail with 503")

    log_level = normalize_log_level(config.log_level).lower()

    uvicorn.run(
        "gemini_gateway.main:app",
        host=config.host,
        port=config.port,
        log_level=log_level,
        access_log=log_level == "debug",
        reload=False,
    )


if __name__ == "__main__":
    main()
