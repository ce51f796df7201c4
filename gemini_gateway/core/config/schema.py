"""Environment variables read by the gateway.

Each variable is declared once as an EnvVarSpec carrying its default, target
type, description and validator. The settings loaders and
``gemgate config validate`` both work from these declarations.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gemini_gateway.core.constants import Constants


def parse_api_keys(value: str) -> tuple[str, ...]:
    """Split a comma and/or whitespace separated list of API keys."""
    return tuple(part for part in re.split(r"[,\s]+", value) if part)


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool, tuple)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
        secret: Whether the value must be masked when displayed
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None
    secret: bool = False


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Server Settings ===

    HOST = EnvVarSpec(
        name="HOST",
        default="0.0.0.0",
        type_hint=str,
        description="Server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=8082,
        type_hint=int,
        description="Server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.split()[0].upper()
        in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    LOG_REQUEST_METRICS = EnvVarSpec(
        name="LOG_REQUEST_METRICS",
        default=True,
        type_hint=bool,
        description="Log START/SUCCESS/ERROR lines for every proxied request",
    )

    # === Upstream Settings ===

    GEMINI_API_KEYS = EnvVarSpec(
        name="GEMINI_API_KEYS",
        default=(),
        type_hint=tuple,
        description="Upstream API keys, separated by commas or whitespace",
        coerce=parse_api_keys,
        secret=True,
    )

    GEMINI_API_KEY = EnvVarSpec(
        name="GEMINI_API_KEY",
        default=None,
        type_hint=str,
        description="Single upstream API key (added to GEMINI_API_KEYS)",
        secret=True,
    )

    GEMINI_BASE_URL = EnvVarSpec(
        name="GEMINI_BASE_URL",
        default=Constants.DEFAULT_GEMINI_BASE_URL,
        type_hint=str,
        description="Base URL of the upstream OpenAI-compatible endpoint",
        validator=lambda x: x.startswith(("http://", "https://")),
    )

    # === Security Settings ===

    PROXY_API_KEY = EnvVarSpec(
        name="PROXY_API_KEY",
        default=None,
        type_hint=str,
        description="Optional API key clients must present (controls access TO the gateway)",
        secret=True,
    )

    # === Timeout & Retry Settings ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=90,
        type_hint=int,
        description="Timeout in seconds for upstream requests",
        validator=lambda x: x > 0,
    )

    MAX_RETRIES = EnvVarSpec(
        name="MAX_RETRIES",
        default=3,
        type_hint=int,
        description="Additional attempts with a different API key after a retryable failure",
        validator=lambda x: x >= 0,
    )

    KEY_COOLDOWN_SECONDS = EnvVarSpec(
        name="KEY_COOLDOWN_SECONDS",
        default=60.0,
        type_hint=float,
        description="Base cooldown applied to an API key after a retryable failure",
        validator=lambda x: x >= 0,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Return every declared spec keyed by environment variable name."""
        return {
            value.name: value
            for value in vars(cls).values()
            if isinstance(value, EnvVarSpec)
        }
