"""HTTP client for the upstream OpenAI-compatible API.

One UpstreamClient wraps one httpx.AsyncClient bound to one API key. Clients
are cheap and short-lived: the retry executor creates a new one for every
attempt, so no connection or credential state is shared between requests.
"""

import json
import logging
import time
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from gemini_gateway.core.constants import Constants
from gemini_gateway.core.exceptions import UpstreamError
from gemini_gateway.core.logging import conversation_logger

logger = logging.getLogger(__name__)


class ChatCompletionStream:
    """An open upstream SSE response yielding decoded chat completion chunks.

    The stream owns its client: ``aclose()`` releases both the response and
    the underlying connection pool.
    """

    def __init__(self, response: httpx.Response, client: "UpstreamClient") -> None:
        self._response = response
        self._client = client
        self._closed = False

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[dict[str, Any]]:
        async for line in self._response.aiter_lines():
            line = line.strip()
            if not line.startswith("data:"):
                # Blank separators, comments and event: lines carry no payload
                continue

            data = line[len("data:") :].strip()
            if data == Constants.SSE_DONE:
                return
            if not data:
                continue

            try:
                yield json.loads(data)
            except json.JSONDecodeError as e:
                raise UpstreamError(
                    f"Malformed stream chunk from upstream: {e.msg}", body=data
                ) from e

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


class UpstreamClient:
    """Client for the upstream OpenAI-compatible endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 90,
        custom_headers: dict[str, str] | None = None,
    ) -> None:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "content-type": "application/json",
        }
        headers.update(custom_headers or {})

        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def list_models(self) -> dict[str, Any]:
        return await self._request("GET", "models")

    async def retrieve_model(self, model_id: str) -> dict[str, Any]:
        # Keep "/" so ids such as "models/gemini-2.5-pro" map onto the upstream path
        return await self._request("GET", f"models/{quote(model_id, safe='/')}")

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "chat/completions", json_body=payload)

    async def create_embedding(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "embeddings", json_body=payload)

    async def open_chat_completion_stream(self, payload: dict[str, Any]) -> ChatCompletionStream:
        """Send a streaming chat completion and return once headers arrive.

        Error statuses are raised here, before any chunk is consumed, so the
        caller can still retry with another key.

        Raises:
            UpstreamError: If the upstream answers with a 4xx/5xx status.
            httpx.HTTPError: On transport failures.
        """
        request = self.client.build_request(
            "POST", "chat/completions", json={**payload, "stream": True}
        )
        conversation_logger.debug(f"📤 UPSTREAM STREAM | Model: {payload.get('model', 'unknown')}")

        response = await self.client.send(request, stream=True)
        if response.status_code >= 400:
            try:
                await response.aread()
            finally:
                await response.aclose()
            raise UpstreamError.from_response(response)

        return ChatCompletionStream(response, self)

    async def _request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        start_time = time.time()
        response = await self.client.request(method, path, json=json_body)
        duration_ms = (time.time() - start_time) * 1000

        if response.status_code >= 400:
            error = UpstreamError.from_response(response)
            logger.debug(
                f"Upstream {method} {path} failed with {response.status_code} "
                f"after {duration_ms:.0f}ms: {error.body[:500]}"
            )
            raise error

        conversation_logger.debug(
            f"📥 UPSTREAM {method} {path} | Status: {response.status_code} | "
            f"Duration: {duration_ms:.0f}ms"
        )
        return response.json()
