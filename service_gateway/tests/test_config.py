"""
Unit tests for gateway configuration.
"""

import pytest
from pydantic import ValidationError

from shared.config import ServiceConfig, get_config


class TestServiceConfig:
    """Test cases for ServiceConfig."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch, tmp_path):
        """Isolate from the developer's environment and .env file."""
        monkeypatch.chdir(tmp_path)
        for name in (
            "GATEWAY_RAWG_API_KEY",
            "GATEWAY_RAWG_MAX_RETRIES",
            "GATEWAY_REQUIRE_API_KEY",
            "GATEWAY_VALID_API_KEYS",
            "GATEWAY_CORS_ALLOWED_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        config = get_config("gateway", 8000)
        assert config.rawg_base_url == "https://api.rawg.io/api"
        assert config.rawg_api_key == ""
        assert config.rawg_api_configured is False
        assert config.rawg_timeout_seconds == 30.0
        assert config.rawg_max_retries == 3
        assert config.require_api_key is False
        assert config.valid_api_keys == frozenset()
        assert config.api_key_header_name == "X-API-Key"
        assert config.api_key_query_parameter_name == "api_key"
        assert config.host == "0.0.0.0"
        assert config.port == 8000

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_RAWG_API_KEY", "upstream")
        monkeypatch.setenv("GATEWAY_RAWG_MAX_RETRIES", "0")
        monkeypatch.setenv("GATEWAY_REQUIRE_API_KEY", "true")
        monkeypatch.setenv("GATEWAY_VALID_API_KEYS", "abc,def , ")
        monkeypatch.setenv("GATEWAY_CORS_ALLOWED_ORIGINS", '["https://a.example", "https://b.example"]')

        config = get_config("gateway", 8000)

        assert config.rawg_api_configured is True
        assert config.rawg_max_retries == 0
        assert config.require_api_key is True
        assert config.valid_api_keys == frozenset({"abc", "def"})
        assert config.cors_allowed_origins == ["https://a.example", "https://b.example"]

    def test_negative_retry_budget_rejected(self):
        with pytest.raises(ValidationError):
            ServiceConfig("gateway", 8000, rawg_max_retries=-1)

    def test_is_immutable(self):
        config = get_config("gateway", 8000)
        with pytest.raises(ValidationError):
            config.rawg_api_key = "changed"

    def test_secrets_hidden_from_repr(self):
        config = ServiceConfig("gateway", 8000, rawg_api_key="upstream-secret", valid_api_keys=["inbound-secret"])
        assert "upstream-secret" not in repr(config)
        assert "inbound-secret" not in repr(config)
