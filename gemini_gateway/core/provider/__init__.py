"""Upstream credential and client management.

- ApiKeyRotator: round-robin API key pool with per-model cooldown
- UpstreamClientFactory: creates a fresh client bound to one API key
"""

from gemini_gateway.core.provider.api_key_rotator import ApiKeyRotator
from gemini_gateway.core.provider.client_factory import UpstreamClientFactory

__all__ = [
    "ApiKeyRotator",
    "UpstreamClientFactory",
]
