"""Type coercion and validation for configuration loading.

Environment variables are loaded according to ConfigSchema. Failures raise
ConfigError with the variable name so users can fix their environment;
values of secret variables never appear in the error text.
"""

import os
from typing import Any

from gemini_gateway.core.config.schema import ConfigSchema, EnvVarSpec


class ConfigError(Exception):
    """Configuration validation error.

    Attributes:
        env_var: The environment variable name
        value: The raw value that failed validation (masked for secrets)
        message: Human-readable error message
    """

    def __init__(self, env_var: str, value: str, message: str) -> None:
        self.env_var = env_var
        self.value = value
        self.message = message
        super().__init__(f"{env_var}={value}: {message}")


_TRUE_VALUES = ("true", "1", "yes", "on")


def _coerce(spec: EnvVarSpec, raw_value: str) -> Any:
    if spec.coerce is not None:
        return spec.coerce(raw_value)
    if spec.type_hint is bool:
        return raw_value.strip().lower() in _TRUE_VALUES
    if spec.type_hint in (int, float):
        return spec.type_hint(raw_value.strip())
    return raw_value


def load_env_var(spec: EnvVarSpec) -> Any:
    """Load and validate a single environment variable.

    Unset variables yield the declared default without running the validator.

    Raises:
        ConfigError: If type conversion or validation fails
    """
    raw_value = os.environ.get(spec.name)
    if raw_value is None:
        return spec.default

    shown = "***" if spec.secret else raw_value

    try:
        value = _coerce(spec, raw_value)
    except (ValueError, TypeError) as e:
        raise ConfigError(
            spec.name, shown, f"Cannot convert to {spec.type_hint.__name__}: {e}"
        ) from e

    if spec.validator is not None:
        try:
            valid = spec.validator(value)
        except (TypeError, AttributeError, IndexError) as e:
            raise ConfigError(spec.name, shown, f"Validation error: {e}") from e
        if not valid:
            raise ConfigError(spec.name, shown, f"Invalid value ({spec.description})")

    return value


def validate_all() -> list[ConfigError]:
    """Validate every schema variable and collect the failures.

    Used by ``gemgate config validate`` to report all problems at once
    instead of stopping at the first one.
    """
    errors: list[ConfigError] = []
    for spec in ConfigSchema.all_specs().values():
        try:
            load_env_var(spec)
        except ConfigError as e:
            errors.append(e)
    return errors
