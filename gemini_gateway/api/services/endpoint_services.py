"""Endpoint service layer.

Each service holds one endpoint's upstream interaction so it can be unit
tested without FastAPI. Services raise; the routing layer turns exceptions
into error responses.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any

from fastapi.responses import JSONResponse, Response

from gemini_gateway.api.services.key_rotation import KeyBalancer
from gemini_gateway.api.services.streaming import chat_completion_sse
from gemini_gateway.conversion import augment_models, build_chat_payload
from gemini_gateway.conversion.search_models import ModelVariant
from gemini_gateway.core.client import ChatCompletionStream
from gemini_gateway.core.provider.client_factory import UpstreamClientFactory
from gemini_gateway.models.openai import ChatCompletionRequest, EmbeddingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpstreamJsonResult:
    """Upstream JSON body relayed to the client unchanged."""

    content: dict[str, Any]
    status: int = 200

    def to_response(self) -> Response:
        return JSONResponse(status_code=self.status, content=self.content)


class ChatCompletionsService:
    """Service for /v1/chat/completions.

    The model variant is resolved by the caller; this service builds the
    upstream body through the request pipeline and runs it with failover.
    """

    def __init__(self, balancer: KeyBalancer, client_factory: UpstreamClientFactory) -> None:
        self._balancer = balancer
        self._client_factory = client_factory

    async def create(
        self, request: ChatCompletionRequest, variant: ModelVariant
    ) -> UpstreamJsonResult:
        payload = build_chat_payload(request, variant)

        async def _call(api_key: str) -> dict[str, Any]:
            async with self._client_factory.create(api_key) as client:
                return await client.create_chat_completion(payload)

        content = await self._balancer.with_retry(variant.upstream_model, _call)
        return UpstreamJsonResult(content=content)

    def stream(
        self, request: ChatCompletionRequest, variant: ModelVariant
    ) -> AsyncGenerator[str, None]:
        """Return the SSE frame generator for a streaming completion.

        Nothing is sent upstream until the generator is first iterated.
        """
        payload = build_chat_payload(request, variant, streaming=True)

        async def _open(api_key: str) -> ChatCompletionStream:
            client = self._client_factory.create(api_key)
            try:
                return await client.open_chat_completion_stream(payload)
            except BaseException:
                await client.aclose()
                raise

        async def _open_with_retry() -> ChatCompletionStream:
            return await self._balancer.with_retry(variant.upstream_model, _open)

        return chat_completion_sse(_open_with_retry)


class ModelsListService:
    """Service for /v1/models: upstream list plus derived "-search" entries."""

    def __init__(self, balancer: KeyBalancer, client_factory: UpstreamClientFactory) -> None:
        self._balancer = balancer
        self._client_factory = client_factory

    async def execute(self) -> UpstreamJsonResult:
        async def _call(api_key: str) -> dict[str, Any]:
            async with self._client_factory.create(api_key) as client:
                return await client.list_models()

        upstream = await self._balancer.without_balancing(_call)
        models = upstream.get("data") if isinstance(upstream, dict) else None
        if not isinstance(models, list):
            logger.warning("Upstream model list has no 'data' array; returning it empty")
            models = []

        combined = augment_models(models)
        logger.debug(f"Listing {len(models)} upstream models, {len(combined)} with search variants")
        return UpstreamJsonResult(content={"object": "list", "data": combined})


class ModelRetrieveService:
    """Service for /v1/models/{model}; the id is forwarded verbatim."""

    def __init__(self, balancer: KeyBalancer, client_factory: UpstreamClientFactory) -> None:
        self._balancer = balancer
        self._client_factory = client_factory

    async def execute(self, model_id: str) -> UpstreamJsonResult:
        async def _call(api_key: str) -> dict[str, Any]:
            async with self._client_factory.create(api_key) as client:
                return await client.retrieve_model(model_id)

        return UpstreamJsonResult(content=await self._balancer.without_balancing(_call))


class EmbeddingsService:
    """Service for /v1/embeddings."""

    def __init__(self, balancer: KeyBalancer, client_factory: UpstreamClientFactory) -> None:
        self._balancer = balancer
        self._client_factory = client_factory

    async def execute(self, request: EmbeddingRequest) -> UpstreamJsonResult:
        """Validate and forward an embedding request.

        Raises:
            InvalidRequestError: If ``model`` or ``input`` is missing; no
                upstream call is made in that case.
        """
        request.ensure_valid()
        payload = request.to_upstream_payload()

        async def _call(api_key: str) -> dict[str, Any]:
            async with self._client_factory.create(api_key) as client:
                return await client.create_embedding(payload)

        content = await self._balancer.with_retry(str(request.model), _call)
        return UpstreamJsonResult(content=content)
