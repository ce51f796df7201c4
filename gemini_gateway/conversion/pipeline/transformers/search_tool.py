"""Search tool transformer.

Attaches the Google Search tool for "-search" model variants.
"""

import dataclasses
from typing import Any

from gemini_gateway.conversion.pipeline.base import ConversionContext, RequestTransformer
from gemini_gateway.core.constants import Constants


def is_search_tool(tool: Any) -> bool:
    """True if ``tool`` is a function tool named googleSearch."""
    if not isinstance(tool, dict) or tool.get("type") != Constants.TOOL_FUNCTION:
        return False
    function = tool.get(Constants.TOOL_FUNCTION)
    return isinstance(function, dict) and function.get("name") == Constants.GOOGLE_SEARCH_TOOL_NAME


class SearchToolTransformer(RequestTransformer):
    """Forwards the client tools, adding the search tool when requested.

    Plain variant: ``tools`` goes upstream exactly as received, so an absent
    field stays absent and an empty list stays empty.

    Search variant: the search tool is appended to the client tools unless
    one is already there; with no client tools the list is just the search
    tool. The client's list is never mutated.
    """

    def transform(self, context: ConversionContext) -> ConversionContext:
        tools = context.chat_request.tools

        if not context.variant.search_enabled:
            if tools is None:
                return context
            new_request = {**context.upstream_request, "tools": tools}
            return dataclasses.replace(context, upstream_request=new_request)

        if tools is None:
            forwarded = [Constants.google_search_tool()]
        elif any(is_search_tool(tool) for tool in tools):
            forwarded = list(tools)
        else:
            forwarded = [*tools, Constants.google_search_tool()]

        new_request = {**context.upstream_request, "tools": forwarded}
        return dataclasses.replace(context, upstream_request=new_request)
