"""Unit tests for environment-driven configuration."""

import pytest

from gemini_gateway.core.config import ConfigError, validate_all
from gemini_gateway.core.config.facade import Config
from gemini_gateway.core.config.schema import EnvVarSpec, parse_api_keys
from gemini_gateway.core.config.validation import load_env_var
from gemini_gateway.core.constants import Constants


@pytest.mark.unit
class TestConfigDefaults:
    def test_defaults(self, gateway_config):
        cfg = gateway_config(
            GEMINI_BASE_URL=None,
            MAX_RETRIES=None,
            KEY_COOLDOWN_SECONDS=None,
            REQUEST_TIMEOUT=None,
        )

        assert cfg.host == "0.0.0.0"
        assert cfg.port == 8082
        assert cfg.log_level == "INFO"
        assert cfg.base_url == Constants.DEFAULT_GEMINI_BASE_URL
        assert cfg.request_timeout == 90
        assert cfg.max_retries == 3
        assert cfg.key_cooldown_seconds == 60.0
        assert cfg.proxy_api_key is None

    def test_overrides(self, gateway_config):
        cfg = gateway_config(PORT="9000", LOG_LEVEL="debug", LOG_REQUEST_METRICS="off")

        assert cfg.port == 9000
        assert cfg.log_level == "DEBUG"
        assert cfg.log_request_metrics is False


@pytest.mark.unit
class TestApiKeyPool:
    def test_comma_and_whitespace_separated(self):
        assert parse_api_keys("a, b\nc  d,,") == ("a", "b", "c", "d")

    def test_single_key_is_merged_and_deduplicated(self, gateway_config):
        cfg = gateway_config(GEMINI_API_KEYS="k1,k2,k1", GEMINI_API_KEY="k3")

        assert cfg.api_keys == ("k1", "k2", "k3")

    def test_single_key_already_in_pool(self, gateway_config):
        cfg = gateway_config(GEMINI_API_KEYS="k1,k2", GEMINI_API_KEY="k1")

        assert cfg.api_keys == ("k1", "k2")

    def test_empty_pool(self, gateway_config):
        assert gateway_config(GEMINI_API_KEYS=None).api_keys == ()

    def test_key_hashes_do_not_reveal_keys(self, gateway_config):
        cfg = gateway_config(GEMINI_API_KEYS="secret-one")

        assert cfg.api_key_hashes == [Config.get_api_key_hash("secret-one")]
        assert len(cfg.api_key_hashes[0]) == 8
        assert "secret" not in cfg.api_key_hashes[0]


@pytest.mark.unit
class TestClientApiKeyValidation:
    def test_open_when_not_configured(self, gateway_config):
        assert gateway_config().validate_client_api_key("anything") is True

    def test_exact_match_required(self, gateway_config):
        cfg = gateway_config(PROXY_API_KEY="proxy-secret")

        assert cfg.validate_client_api_key("proxy-secret") is True
        assert cfg.validate_client_api_key("proxy-secre") is False


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize(
        "name, value",
        [
            ("PORT", "not-a-number"),
            ("PORT", "70000"),
            ("LOG_LEVEL", "LOUD"),
            ("GEMINI_BASE_URL", "ftp://example.com"),
            ("REQUEST_TIMEOUT", "0"),
            ("MAX_RETRIES", "-1"),
            ("KEY_COOLDOWN_SECONDS", "-5"),
        ],
    )
    def test_invalid_values_raise(self, gateway_config, name, value):
        with pytest.raises(ConfigError) as exc_info:
            gateway_config(**{name: value})

        assert exc_info.value.env_var == name

    def test_secret_values_are_masked(self, monkeypatch):
        monkeypatch.setenv("PROXY_API_KEY", "super-secret")
        spec = EnvVarSpec(
            name="PROXY_API_KEY",
            default=None,
            type_hint=str,
            description="test",
            validator=lambda x: False,
            secret=True,
        )

        with pytest.raises(ConfigError) as exc_info:
            load_env_var(spec)

        assert exc_info.value.value == "***"
        assert "super-secret" not in str(exc_info.value)

    def test_validate_all_collects_every_error(self, monkeypatch):
        monkeypatch.setenv("PORT", "0")
        monkeypatch.setenv("MAX_RETRIES", "many")

        errors = validate_all()

        assert sorted(e.env_var for e in errors) == ["MAX_RETRIES", "PORT"]

    def test_validate_all_clean_environment(self):
        assert validate_all() == []
