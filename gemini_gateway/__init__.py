"""Gemini OpenAI Gateway

An OpenAI-compatible gateway in front of Gemini's OpenAI facade, with API key
rotation and synthetic "-search" models that enable Google Search grounding.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("gemini-openai-gateway")
except PackageNotFoundError:
    __version__ = "0.1.0"
__author__ = "Gemini OpenAI Gateway"
