"""Request conversion: model variants, model list augmentation and the chat pipeline."""

from typing import Any

from gemini_gateway.conversion.pipeline import ConversionContext, RequestPipelineFactory
from gemini_gateway.conversion.search_models import (
    ModelVariant,
    augment_models,
    is_search_eligible,
    resolve_model_variant,
)
from gemini_gateway.models.openai import ChatCompletionRequest

__all__ = [
    "ModelVariant",
    "augment_models",
    "build_chat_payload",
    "is_search_eligible",
    "resolve_model_variant",
]


def build_chat_payload(
    request: ChatCompletionRequest, variant: ModelVariant, *, streaming: bool = False
) -> dict[str, Any]:
    """Run the default pipeline and return the upstream chat body."""
    context = ConversionContext(chat_request=request, variant=variant, streaming=streaming)
    return RequestPipelineFactory.create_default().execute(context)
