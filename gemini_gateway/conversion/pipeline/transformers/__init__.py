"""Chat request transformers.

Each transformer handles a single, focused change to the upstream body.
Transformers are executed in sequence by the RequestPipeline.
"""

from gemini_gateway.conversion.pipeline.transformers.core_fields import CoreFieldsTransformer
from gemini_gateway.conversion.pipeline.transformers.search_tool import SearchToolTransformer
from gemini_gateway.conversion.pipeline.transformers.tool_choice import ToolChoiceTransformer

__all__ = [
    "CoreFieldsTransformer",
    "SearchToolTransformer",
    "ToolChoiceTransformer",
]
