"""Factory for per-attempt upstream clients."""

from dataclasses import dataclass, field

from gemini_gateway.core.client import UpstreamClient


@dataclass(frozen=True)
class UpstreamClientFactory:
    """Creates a fresh UpstreamClient for a given API key.

    The factory only holds immutable connection settings. Nothing is cached:
    every retry attempt gets its own client bound to the key it was handed,
    and the caller closes it when the attempt is over.
    """

    base_url: str
    timeout: float = 90
    custom_headers: dict[str, str] = field(default_factory=dict)

    def create(self, api_key: str) -> UpstreamClient:
        return UpstreamClient(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            custom_headers=self.custom_headers,
        )
