"""Gateway configuration.

``config`` is the process-wide instance, loaded from the environment on first
access so that ``gemgate config validate`` can still import this package and
report problems when the environment is invalid. ``create_app`` accepts an
explicit Config for tests and embedding.
"""

from typing import Any

from gemini_gateway.core.config.facade import Config
from gemini_gateway.core.config.validation import ConfigError, validate_all

_config: Config | None = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config


def __getattr__(name: str) -> Any:
    if name == "config":
        return get_config()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Config", "ConfigError", "config", "get_config", "validate_all"]
