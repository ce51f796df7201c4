"""Configuration facade for the gateway.

Gives direct, read-only property access to configuration values. All
values are loaded from environment variables at construction time using
schema-based validation, split into focused groups:
- server: bind address, port, log level, request logging
- upstream: API key pool, base URL, timeout, retry and cooldown policy
- security: proxy API key for client authentication
"""

import hashlib

from gemini_gateway.core.config.settings import (
    SecuritySettings,
    ServerSettings,
    UpstreamSettings,
)


class Config:
    """Configuration with direct access to all settings.

    Raises ConfigError on construction when an environment variable is
    present but invalid.
    """

    def __init__(self) -> None:
        self._server = ServerSettings.load()
        self._upstream = UpstreamSettings.load()
        self._security = SecuritySettings.load()

    # Server settings
    @property
    def host(self) -> str:
        return self._server.host

    @property
    def port(self) -> int:
        return self._server.port

    @property
    def log_level(self) -> str:
        return self._server.log_level

    @property
    def log_request_metrics(self) -> bool:
        return self._server.log_request_metrics

    # Upstream settings
    @property
    def api_keys(self) -> tuple[str, ...]:
        return self._upstream.api_keys

    @property
    def base_url(self) -> str:
        return self._upstream.base_url

    @property
    def request_timeout(self) -> int:
        return self._upstream.request_timeout

    @property
    def max_retries(self) -> int:
        return self._upstream.max_retries

    @property
    def key_cooldown_seconds(self) -> float:
        return self._upstream.key_cooldown_seconds

    @property
    def api_key_hashes(self) -> list[str]:
        """First 8 chars of the sha256 of each key, for display."""
        return [self.get_api_key_hash(key) for key in self.api_keys]

    @staticmethod
    def get_api_key_hash(api_key: str) -> str:
        return hashlib.sha256(api_key.encode()).hexdigest()[:8]

    # Security settings
    @property
    def proxy_api_key(self) -> str | None:
        return self._security.proxy_api_key

    def validate_client_api_key(self, client_api_key: str) -> bool:
        return SecuritySettings.validate_client_api_key(self.proxy_api_key, client_api_key)
