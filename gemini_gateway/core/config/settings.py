"""Focused configuration groups.

Each group is a frozen dataclass loaded from the environment through
ConfigSchema, so values are coerced and validated in one place:
- ServerConfig: bind address, port, log level
- UpstreamConfig: credential pool, base URL, timeout and retry policy
- SecurityConfig: optional proxy API key
"""

import secrets
from dataclasses import dataclass

from gemini_gateway.core.config.schema import ConfigSchema
from gemini_gateway.core.config.validation import load_env_var


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    log_level: str
    log_request_metrics: bool


@dataclass(frozen=True)
class UpstreamConfig:
    """Upstream connection settings.

    Attributes:
        api_keys: Ordered, de-duplicated credential pool
        base_url: Base URL of the OpenAI-compatible facade
        request_timeout: Timeout in seconds for every upstream call
        max_retries: Extra attempts with another key after a retryable failure
        key_cooldown_seconds: Base cooldown for a key after a retryable failure
    """

    api_keys: tuple[str, ...]
    base_url: str
    request_timeout: int
    max_retries: int
    key_cooldown_seconds: float


@dataclass(frozen=True)
class SecurityConfig:
    proxy_api_key: str | None


class ServerSettings:
    @staticmethod
    def load() -> ServerConfig:
        return ServerConfig(
            host=load_env_var(ConfigSchema.HOST),
            port=load_env_var(ConfigSchema.PORT),
            # Drop trailing comments such as "INFO  # verbose in prod"
            log_level=load_env_var(ConfigSchema.LOG_LEVEL).split()[0].upper(),
            log_request_metrics=load_env_var(ConfigSchema.LOG_REQUEST_METRICS),
        )


class UpstreamSettings:
    @staticmethod
    def load() -> UpstreamConfig:
        """Load upstream settings.

        GEMINI_API_KEY is appended to GEMINI_API_KEYS when it is not already
        part of the pool. Duplicates are dropped, first occurrence wins.
        """
        keys = list(load_env_var(ConfigSchema.GEMINI_API_KEYS))
        single_key = load_env_var(ConfigSchema.GEMINI_API_KEY)
        if single_key and single_key.strip():
            keys.append(single_key.strip())

        return UpstreamConfig(
            api_keys=tuple(dict.fromkeys(keys)),
            base_url=load_env_var(ConfigSchema.GEMINI_BASE_URL),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
            max_retries=load_env_var(ConfigSchema.MAX_RETRIES),
            key_cooldown_seconds=load_env_var(ConfigSchema.KEY_COOLDOWN_SECONDS),
        )


class SecuritySettings:
    @staticmethod
    def load() -> SecurityConfig:
        proxy_api_key = load_env_var(ConfigSchema.PROXY_API_KEY)
        return SecurityConfig(proxy_api_key=proxy_api_key or None)

    @staticmethod
    def validate_client_api_key(expected: str | None, client_api_key: str) -> bool:
        """Constant-time comparison of the client key with the configured one."""
        if not expected:
            return True
        return secrets.compare_digest(expected.encode(), client_api_key.encode())
