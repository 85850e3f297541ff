"""
Tests for the configuration module.
"""

import json

import pytest
import yaml

from shopify_gql.config import ConfigLoader, LoggingConfig, LogLevel, ShopifyConfig
from shopify_gql.exceptions import ConfigurationError

API_URL = "https://test-shop.myshopify.com/admin/api/2024-01/graphql.json"

ENV_VARS = (
    "SHOPIFY_API_URL",
    "SHOPIFY_API_TOKEN",
    "SHOPIFY_TIMEOUT",
    "SHOPIFY_USER_AGENT",
    "SHOPIFY_LOG_LEVEL",
    "SHOPIFY_LOG_FORMAT",
    "SHOPIFY_LOG_STRUCTURED",
    "API_URL",
    "API_TOKEN",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate the loader from the real environment and config files."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return monkeypatch


class TestShopifyConfig:
    """Test the configuration models."""

    def test_defaults(self):
        config = ShopifyConfig(api_url=API_URL, api_token="shpat_abc")
        assert config.timeout == 30.0
        assert config.logging.level == LogLevel.INFO
        assert config.endpoint == API_URL

    def test_token_hidden(self):
        config = ShopifyConfig(api_url=API_URL, api_token="shpat_abc")
        assert "shpat_abc" not in repr(config)
        assert config.masked()["api_token"] == "***"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"api_url": "not a url", "api_token": "t"},
            {"api_url": API_URL, "api_token": "   "},
            {"api_url": API_URL, "api_token": "t", "timeout": 0},
            {"api_url": API_URL},
            {"api_url": API_URL, "api_token": "t", "unknown": 1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ShopifyConfig(**kwargs)

    def test_log_level_case_insensitive(self):
        assert LoggingConfig(level="debug").level == LogLevel.DEBUG


class TestConfigLoader:
    """Test loading from files and environment variables."""

    def test_environment(self, clean_env):
        clean_env.setenv("SHOPIFY_API_URL", API_URL)
        clean_env.setenv("SHOPIFY_API_TOKEN", "shpat_123456")
        clean_env.setenv("SHOPIFY_TIMEOUT", "12.5")
        clean_env.setenv("SHOPIFY_LOG_LEVEL", "WARNING")

        config = ConfigLoader().load_config()

        assert config.endpoint == API_URL
        assert config.api_token.get_secret_value() == "shpat_123456"
        assert config.timeout == 12.5
        assert config.logging.level == LogLevel.WARNING

    def test_numeric_token_kept_as_string(self, clean_env):
        clean_env.setenv("SHOPIFY_API_URL", API_URL)
        clean_env.setenv("SHOPIFY_API_TOKEN", "0123456789")

        config = ConfigLoader().load_config()

        assert config.api_token.get_secret_value() == "0123456789"

    def test_unprefixed_fallback(self, clean_env):
        clean_env.setenv("API_URL", API_URL)
        clean_env.setenv("API_TOKEN", "plain")

        config = ConfigLoader().load_config()

        assert config.api_token.get_secret_value() == "plain"

    def test_prefixed_wins_over_fallback(self, clean_env):
        clean_env.setenv("API_URL", API_URL)
        clean_env.setenv("API_TOKEN", "plain")
        clean_env.setenv("SHOPIFY_API_TOKEN", "prefixed")

        config = ConfigLoader().load_config()

        assert config.api_token.get_secret_value() == "prefixed"

    def test_yaml_file(self, clean_env, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            yaml.safe_dump(
                {"api_url": API_URL, "api_token": "from-file", "logging": {"level": "DEBUG"}}
            )
        )

        config = ConfigLoader().load_config(path)

        assert config.api_token.get_secret_value() == "from-file"
        assert config.logging.level == LogLevel.DEBUG

    def test_env_overrides_file(self, clean_env, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps({"api_url": API_URL, "api_token": "from-file", "logging": {"level": "DEBUG"}})
        )
        clean_env.setenv("SHOPIFY_API_TOKEN", "from-env")
        clean_env.setenv("SHOPIFY_LOG_STRUCTURED", "true")

        config = ConfigLoader().load_config(str(path))

        assert config.api_token.get_secret_value() == "from-env"
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.enable_structured is True

    def test_default_file_discovered(self, clean_env, tmp_path):
        (tmp_path / "shopify_gql.json").write_text(
            json.dumps({"api_url": API_URL, "api_token": "discovered"})
        )

        config = ConfigLoader().load_config()

        assert config.api_token.get_secret_value() == "discovered"

    def test_missing_settings(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().load_config()
        assert "api_url" in str(exc_info.value)

    def test_missing_file(self, clean_env, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(tmp_path / "absent.yaml")

    def test_unsupported_format(self, clean_env, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[shopify]")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(path)

    def test_malformed_file(self, clean_env, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(path)

    def test_non_mapping_file(self, clean_env, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(path)

    def test_convert_env_value(self):
        loader = ConfigLoader()
        assert loader._convert_env_value("true") is True
        assert loader._convert_env_value("off") is False
        assert loader._convert_env_value("30") == 30
        assert loader._convert_env_value("2.5") == 2.5
        assert loader._convert_env_value("abc") == "abc"

    def test_deep_merge(self):
        merged = ConfigLoader()._deep_merge(
            {"a": 1, "logging": {"level": "INFO", "format": "f"}},
            {"logging": {"level": "DEBUG"}},
        )
        assert merged == {"a": 1, "logging": {"level": "DEBUG", "format": "f"}}
