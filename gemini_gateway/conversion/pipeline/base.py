"""Base infrastructure for the chat request pipeline.

- ConversionContext: Immutable context passed through transformers
- RequestTransformer: Abstract base for all transformation steps
- RequestPipeline: Runs transformers in sequence
"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any

from gemini_gateway.conversion.search_models import ModelVariant
from gemini_gateway.models.openai import ChatCompletionRequest


@dataclasses.dataclass(frozen=True)
class ConversionContext:
    """Immutable context passed through the pipeline.

    Attributes:
        chat_request: The client request.
        variant: The model variant resolved at the handler boundary.
        streaming: Whether the upstream call will be streamed.
        upstream_request: The upstream body being built.
    """

    chat_request: ChatCompletionRequest
    variant: ModelVariant
    streaming: bool = False
    upstream_request: dict[str, Any] = dataclasses.field(default_factory=dict)


class RequestTransformer(ABC):
    """Base class for one focused transformation of the upstream body.

    Transformers must not mutate the input context; they return a new one
    built with dataclasses.replace().
    """

    @abstractmethod
    def transform(self, context: ConversionContext) -> ConversionContext:
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__


class RequestPipeline:
    """Runs transformers in order, each receiving the previous output."""

    def __init__(self, transformers: list[RequestTransformer]) -> None:
        self.transformers = transformers
        self.logger = logging.getLogger(f"{__name__}.RequestPipeline")

    def execute(self, initial_context: ConversionContext) -> dict[str, Any]:
        """Execute all transformers and return the final upstream body.

        Raises:
            Exception: Whatever a transformer raised, after logging which one failed.
        """
        context = initial_context

        for i, transformer in enumerate(self.transformers):
            self.logger.debug(
                f"Running transformer [{i + 1}/{len(self.transformers)}]: {transformer.name}"
            )
            try:
                context = transformer.transform(context)
            except Exception as e:
                self.logger.error(f"Transformer {transformer.name} failed: {e}", exc_info=True)
                raise

        return context.upstream_request
