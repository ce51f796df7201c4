from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

from fastapi.responses import StreamingResponse

from gemini_gateway.api.services.error_handling import build_error_payload
from gemini_gateway.core.client import ChatCompletionStream
from gemini_gateway.core.constants import Constants

OpenStream = Callable[[], Awaitable[ChatCompletionStream]]

logger = logging.getLogger(__name__)


def sse_headers() -> dict[str, str]:
    # Centralize the SSE header contract used by every streaming endpoint.
    return {
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "*",
    }


def streaming_response(
    *,
    stream: AsyncGenerator[str, None],
    headers: dict[str, str] | None = None,
) -> StreamingResponse:
    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers=headers or sse_headers(),
    )


def sse_event(payload: Any) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def sse_done() -> str:
    return f"data: {Constants.SSE_DONE}\n\n"


async def chat_completion_sse(open_stream: OpenStream) -> AsyncGenerator[str, None]:
    """Relay an upstream chat completion stream as SSE frames.

    The upstream stream is opened lazily, so failures while connecting and
    failures mid-stream are reported the same way: a single error event and
    no [DONE] terminator. The upstream response is closed on every exit path,
    including client disconnects.
    """
    stream: ChatCompletionStream | None = None
    try:
        stream = await open_stream()
        async for chunk in stream:
            yield sse_event(chunk)
        yield sse_done()
    except Exception as e:
        status_code, body = build_error_payload(e)
        logger.error(f"Streaming error ({status_code}): {body['error']['message']}")
        yield sse_event(body)
    finally:
        if stream is not None:
            await stream.aclose()
