"""Protocol constants shared across the gateway."""

from typing import Any


class Constants:
    TOOL_FUNCTION = "function"

    SEARCH_MODEL_SUFFIX = "-search"
    GOOGLE_SEARCH_TOOL_NAME = "googleSearch"
    GOOGLE_SEARCH_TOOL_DESCRIPTION = "Google Search"

    # Models from gemini-2.x upwards get a synthetic "-search" sibling
    SEARCH_ELIGIBLE_MODEL_PATTERN = r"^gemini-[2-9]\.\d"
    DEFAULT_OWNED_BY = "google"

    DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

    SSE_DONE = "[DONE]"

    @classmethod
    def google_search_tool(cls) -> dict[str, Any]:
        """Return a fresh copy of the injected search tool descriptor."""
        return {
            "type": cls.TOOL_FUNCTION,
            cls.TOOL_FUNCTION: {
                "name": cls.GOOGLE_SEARCH_TOOL_NAME,
                "description": cls.GOOGLE_SEARCH_TOOL_DESCRIPTION,
            },
        }
