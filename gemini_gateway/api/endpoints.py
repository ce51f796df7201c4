"""OpenAI-compatible routes and public health/info routes."""

import logging
import time
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse, Response

from gemini_gateway import __version__
from gemini_gateway.api.services.endpoint_services import (
    ChatCompletionsService,
    EmbeddingsService,
    ModelRetrieveService,
    ModelsListService,
)
from gemini_gateway.api.services.error_handling import error_response
from gemini_gateway.api.services.key_rotation import KeyBalancer
from gemini_gateway.api.services.streaming import streaming_response
from gemini_gateway.conversion import resolve_model_variant
from gemini_gateway.core.config import Config
from gemini_gateway.core.exceptions import AuthenticationError
from gemini_gateway.core.logging import conversation_logger, correlation_context
from gemini_gateway.core.provider.client_factory import UpstreamClientFactory
from gemini_gateway.models.openai import ChatCompletionRequest, EmbeddingRequest


logger = logging.getLogger(__name__)


def get_config(request: Request) -> Config:
    return request.app.state.config  # type: ignore[no-any-return]


def get_balancer(request: Request) -> KeyBalancer:
    return request.app.state.key_balancer  # type: ignore[no-any-return]


def get_client_factory(request: Request) -> UpstreamClientFactory:
    return request.app.state.client_factory  # type: ignore[no-any-return]


async def validate_api_key(
    request: Request,
    x_api_key: str | None = Header(None),
    authorization: str | None = Header(None),
) -> None:
    """Validate the client's API key from either x-api-key header or Authorization header."""
    cfg = get_config(request)

    # Open gateway when PROXY_API_KEY is not set
    if not cfg.proxy_api_key:
        return

    client_api_key = None
    if x_api_key:
        client_api_key = x_api_key
    elif authorization and authorization.startswith("Bearer "):
        client_api_key = authorization[len("Bearer ") :]

    if not client_api_key or not cfg.validate_client_api_key(client_api_key):
        logger.warning("Invalid API key provided by client")
        raise AuthenticationError("Invalid API key.")


public_router = APIRouter()
router = APIRouter(prefix="/v1", dependencies=[Depends(validate_api_key)])


@router.post("/chat/completions")
async def create_chat_completion(
    chat_request: ChatCompletionRequest,
    http_request: Request,
    balancer: KeyBalancer = Depends(get_balancer),
    client_factory: UpstreamClientFactory = Depends(get_client_factory),
) -> Response:
    request_id = str(uuid.uuid4())
    log_metrics = get_config(http_request).log_request_metrics
    variant = resolve_model_variant(chat_request.model)
    service = ChatCompletionsService(balancer, client_factory)

    with correlation_context(request_id):
        if log_metrics:
            conversation_logger.info(
                f"🚀 START | Model: {chat_request.model} | "
                f"Upstream: {variant.upstream_model} | "
                f"Search: {variant.search_enabled} | "
                f"Stream: {chat_request.stream} | "
                f"Messages: {len(chat_request.messages)} | "
                f"Tools: {len(chat_request.tools) if chat_request.tools else 0}"
            )

        if chat_request.stream:
            return streaming_response(
                stream=_logged_stream(
                    service.stream(chat_request, variant), request_id, log_metrics
                )
            )

        start_time = time.time()
        try:
            result = await service.create(chat_request, variant)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            if log_metrics:
                conversation_logger.error(f"❌ ERROR | Duration: {duration_ms:.0f}ms | Error: {e}")
            return error_response(e, context="creating chat completion")

        if log_metrics:
            duration_ms = (time.time() - start_time) * 1000
            prompt_tokens, completion_tokens = _token_counts(result.content)
            conversation_logger.info(
                f"✅ SUCCESS | Duration: {duration_ms:.0f}ms | "
                f"Tokens: {prompt_tokens:,}→{completion_tokens:,}"
            )
        return result.to_response()


def _token_counts(content: Any) -> tuple[int, int]:
    usage = content.get("usage") if isinstance(content, dict) else None
    if not isinstance(usage, dict):
        return 0, 0

    def count(name: str) -> int:
        value = usage.get(name)
        return value if isinstance(value, int) else 0

    return count("prompt_tokens"), count("completion_tokens")


async def _logged_stream(
    stream: AsyncGenerator[str, None], request_id: str, log_metrics: bool
) -> AsyncGenerator[str, None]:
    # The response body is iterated after the handler returned, so the
    # correlation id has to be set again here.
    start_time = time.time()
    chunks = 0
    with correlation_context(request_id):
        try:
            async for frame in stream:
                chunks += 1
                yield frame
        finally:
            await stream.aclose()
            if log_metrics:
                duration_ms = (time.time() - start_time) * 1000
                conversation_logger.info(
                    f"🏁 STREAM END | Duration: {duration_ms:.0f}ms | Frames: {chunks}"
                )


@router.get("/models")
async def list_models(
    balancer: KeyBalancer = Depends(get_balancer),
    client_factory: UpstreamClientFactory = Depends(get_client_factory),
) -> Response:
    try:
        result = await ModelsListService(balancer, client_factory).execute()
    except Exception as e:
        return error_response(e, context="listing models")
    return result.to_response()


@router.get("/models/{model_id:path}")
async def retrieve_model(
    model_id: str,
    balancer: KeyBalancer = Depends(get_balancer),
    client_factory: UpstreamClientFactory = Depends(get_client_factory),
) -> Response:
    try:
        result = await ModelRetrieveService(balancer, client_factory).execute(model_id)
    except Exception as e:
        return error_response(e, context=f"retrieving model '{model_id}'")
    return result.to_response()


@router.post("/embeddings")
async def create_embedding(
    embedding_request: EmbeddingRequest,
    balancer: KeyBalancer = Depends(get_balancer),
    client_factory: UpstreamClientFactory = Depends(get_client_factory),
) -> Response:
    try:
        result = await EmbeddingsService(balancer, client_factory).execute(embedding_request)
    except Exception as e:
        return error_response(e, context="creating embedding")
    return result.to_response()


@public_router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    cfg = get_config(request)
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "api_keys_configured": len(cfg.api_keys),
            "client_api_key_validation": bool(cfg.proxy_api_key),
        },
    )


@public_router.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": f"Gemini OpenAI Gateway v{__version__}",
        "status": "running",
        "endpoints": {
            "chat_completions": "/v1/chat/completions",
            "models": "/v1/models",
            "model": "/v1/models/{model}",
            "embeddings": "/v1/embeddings",
            "health": "/health",
        },
    }
