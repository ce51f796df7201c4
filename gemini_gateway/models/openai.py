"""Pydantic models for the OpenAI-compatible request bodies."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from gemini_gateway.core.exceptions import InvalidRequestError


class ChatCompletionRequest(BaseModel):
    """Body of POST /v1/chat/completions.

    Only the fields the gateway acts on are declared; any other OpenAI
    parameter (temperature, max_tokens, response_format, ...) is kept in
    ``model_extra`` and forwarded as-is.
    """

    model_config = ConfigDict(extra="allow")

    model: str = Field(..., min_length=1)
    messages: list[dict[str, Any]]
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    stream: bool | None = False

    @property
    def passthrough_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class EmbeddingRequest(BaseModel):
    """Body of POST /v1/embeddings.

    ``model`` and ``input`` are optional at the schema level so that their
    absence is reported as an ``invalid_request_error`` by ``ensure_valid``.
    """

    model: str | None = None
    input: str | list[Any] | None = None
    encoding_format: Literal["float", "base64"] | None = None
    dimensions: int | None = Field(default=None, gt=0)

    def ensure_valid(self) -> None:
        # An empty list is a present input and goes upstream as-is
        if not self.model or self.input is None or self.input == "":
            raise InvalidRequestError("Request body must include both 'model' and 'input'.")

    def to_upstream_payload(self) -> dict[str, Any]:
        """Build the upstream body; unset optional fields are omitted, not null."""
        payload: dict[str, Any] = {"model": self.model, "input": self.input}
        if self.encoding_format:
            payload["encoding_format"] = self.encoding_format
        if self.dimensions:
            payload["dimensions"] = self.dimensions
        return payload
