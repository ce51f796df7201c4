"""Request pipeline factory."""

from gemini_gateway.conversion.pipeline.base import RequestPipeline, RequestTransformer
from gemini_gateway.conversion.pipeline.transformers.core_fields import CoreFieldsTransformer
from gemini_gateway.conversion.pipeline.transformers.search_tool import SearchToolTransformer
from gemini_gateway.conversion.pipeline.transformers.tool_choice import ToolChoiceTransformer


class RequestPipelineFactory:
    """Builds chat request pipelines."""

    @staticmethod
    def create_default() -> RequestPipeline:
        """Create the default chat pipeline.

        Transformers are executed in the following order:
        1. CoreFieldsTransformer - model, messages, passthrough, stream
        2. SearchToolTransformer - tools, plus googleSearch for "-search" models
        3. ToolChoiceTransformer - tool_choice
        """
        transformers: list[RequestTransformer] = [
            CoreFieldsTransformer(),
            SearchToolTransformer(),
            ToolChoiceTransformer(),
        ]
        return RequestPipeline(transformers)

    @staticmethod
    def create_custom(transformers: list[RequestTransformer]) -> RequestPipeline:
        return RequestPipeline(transformers)
