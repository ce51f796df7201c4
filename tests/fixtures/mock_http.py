"""RESPX-based HTTP mocking fixtures for the Gemini OpenAI-compatible API."""

import json

import httpx
import pytest
import respx

GEMINI_HOST = "https://generativelanguage.googleapis.com"


# === Upstream Response Fixtures ===


@pytest.fixture
def gemini_chat_completion():
    """Standard chat completion response from the OpenAI-compatible facade."""
    return {
        "id": "chatcmpl-gemini-123",
        "object": "chat.completion",
        "created": 1735689600,
        "model": "gemini-2.5-flash",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello! How can I help you today?"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 15, "total_tokens": 25},
    }


@pytest.fixture
def gemini_stream_chunks():
    """Three content chunks: A, B and C."""
    return [
        {
            "id": "chatcmpl-gemini-123",
            "object": "chat.completion.chunk",
            "choices": [{"index": 0, "delta": {"role": "assistant", "content": text}}],
        }
        for text in ("A", "B", "C")
    ]


@pytest.fixture
def gemini_models_list():
    """Upstream model list with eligible and ineligible entries."""
    return {
        "object": "list",
        "data": [
            {"id": "gemini-2.5-flash", "object": "model", "created": 1700000000, "owned_by": "google"},
            {"id": "gemini-1.5-pro", "object": "model", "created": 1600000000, "owned_by": "google"},
            {"id": "text-embedding-004", "object": "model", "created": 1650000000, "owned_by": "google"},
        ],
    }


@pytest.fixture
def gemini_embedding_response():
    """Standard embeddings response."""
    return {
        "object": "list",
        "data": [{"object": "embedding", "index": 0, "embedding": [0.1, 0.2, 0.3]}],
        "model": "text-embedding-004",
        "usage": {"prompt_tokens": 2, "total_tokens": 2},
    }


# === RESPX Mock Fixtures ===


@pytest.fixture
def mock_gemini_api():
    """Mock the Gemini OpenAI-compatible endpoints with RESPX.

    Routes are registered with full paths, e.g. "/v1beta/openai/chat/completions".
    Unused routes are allowed so tests can assert that nothing was called.

    Example:
        def test_chat(mock_gemini_api, gemini_chat_completion):
            mock_gemini_api.post("/v1beta/openai/chat/completions").mock(
                return_value=httpx.Response(200, json=gemini_chat_completion)
            )
    """
    with respx.mock(base_url=GEMINI_HOST, assert_all_called=False) as respx_mock:
        yield respx_mock


# === Helper Functions ===


def create_openai_error(status_code: int, error_type: str, message: str) -> dict:
    """Create an OpenAI-formatted error body.

    Args:
        status_code: HTTP status code, echoed as the error code
        error_type: Error type (e.g., "invalid_request_error", "rate_limit_error")
        message: Error message
    """
    return {
        "error": {
            "message": message,
            "type": error_type,
            "code": status_code,
        }
    }


def create_streaming_response(chunks: list[dict], *, done: bool = True) -> httpx.Response:
    """Create an SSE HTTP response from decoded chunks."""
    body = "".join(f"data: {json.dumps(chunk)}\n\n" for chunk in chunks)
    if done:
        body += "data: [DONE]\n\n"
    return httpx.Response(
        status_code=200,
        headers={"content-type": "text/event-stream"},
        content=body.encode(),
    )


def sse_payloads(body: str) -> list[str]:
    """Split an SSE body into the raw ``data:`` payloads it carries."""
    return [
        frame[len("data: ") :]
        for frame in body.split("\n\n")
        if frame.startswith("data: ")
    ]
