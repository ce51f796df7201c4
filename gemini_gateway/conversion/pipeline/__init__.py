"""Chat request pipeline.

Turns a validated ChatCompletionRequest plus its resolved model variant into
the body sent upstream. Each transformer handles a single responsibility.
"""

from gemini_gateway.conversion.pipeline.base import (
    ConversionContext,
    RequestPipeline,
    RequestTransformer,
)
from gemini_gateway.conversion.pipeline.factory import RequestPipelineFactory

__all__ = ["ConversionContext", "RequestPipeline", "RequestTransformer", "RequestPipelineFactory"]
