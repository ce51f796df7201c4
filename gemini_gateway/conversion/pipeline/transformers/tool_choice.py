"""Tool choice transformer.

Forwards tool_choice when the client set one.
"""

import dataclasses

from gemini_gateway.conversion.pipeline.base import ConversionContext, RequestTransformer


class ToolChoiceTransformer(RequestTransformer):
    """Passes tool_choice through unchanged.

    Both OpenAI forms are accepted upstream: a string ("auto", "none",
    "required") or {"type": "function", "function": {"name": "..."}}.
    """

    def transform(self, context: ConversionContext) -> ConversionContext:
        tool_choice = context.chat_request.tool_choice
        if tool_choice is None:
            return context

        new_request = {**context.upstream_request, "tool_choice": tool_choice}
        return dataclasses.replace(context, upstream_request=new_request)
