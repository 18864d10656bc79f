"""
Tests for environment-driven configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from content_generator.core.config import (
    APIConfig,
    GeminiConfig,
    RateLimitConfig,
    RetryConfig,
    Settings,
)

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_API_URL",
    "GEMINI_REPORTED_MODEL",
    "GEMINI_TIMEOUT",
    "GEMINI_TEMPERATURE",
    "PORT",
    "API_PORT",
    "VERCEL",
    "API_VERCEL",
    "API_CORS_ORIGINS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_BASE_DELAY",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_gemini_defaults(self):
        config = GeminiConfig()
        assert config.api_key is None
        assert config.api_url.endswith(":generateContent")
        assert config.reported_model == "gemini-pro"
        assert (config.temperature, config.top_k, config.top_p) == (0.7, 40, 0.95)
        assert config.max_output_tokens == 1024

    def test_api_defaults(self):
        config = APIConfig()
        assert config.port == 3000
        assert config.cors_origins == "*"
        assert config.max_request_body_bytes == 10 * 1024 * 1024
        assert config.environment == "local"
        assert isinstance(config.static_dir, Path)

    def test_retry_and_rate_limit_defaults(self):
        retry = RetryConfig()
        assert (retry.max_attempts, retry.base_delay, retry.backoff_multiplier) == (3, 1.0, 2.0)
        assert retry.max_delay == 30.0
        limit = RateLimitConfig()
        assert (limit.max_requests, limit.window_seconds) == (15, 60)


class TestEnvironmentOverrides:
    def test_api_key_is_secret(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "sk-test-123")
        config = GeminiConfig()
        assert config.api_key is not None
        assert config.api_key.get_secret_value() == "sk-test-123"
        assert "sk-test-123" not in repr(config)

    def test_plain_port_variable(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert APIConfig().port == 8080

    def test_vercel_flag(self, monkeypatch):
        monkeypatch.setenv("VERCEL", "1")
        assert APIConfig().environment == "vercel"

    def test_retry_and_rate_limit_overrides(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "100")
        settings = Settings()
        assert settings.retry.max_attempts == 5
        assert settings.rate_limit.max_requests == 100

    def test_rejects_non_http_url(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_URL", "ftp://upstream.test/generate")
        with pytest.raises(ValidationError):
            GeminiConfig()

    @pytest.mark.parametrize(
        ("name", "value"),
        [("RETRY_MAX_ATTEMPTS", "0"), ("RATE_LIMIT_WINDOW_SECONDS", "0"), ("GEMINI_TIMEOUT", "-1")],
    )
    def test_rejects_out_of_range_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            Settings()


class TestDotEnvFile:
    def test_sections_read_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text(
            "GEMINI_API_KEY=from-dotenv\n"
            "GEMINI_REPORTED_MODEL=gemini-1.5-pro\n"
            "PORT=4100\n"
            "RETRY_MAX_ATTEMPTS=4\n"
            "RATE_LIMIT_MAX_REQUESTS=3\n",
            encoding="utf-8",
        )

        settings = Settings()

        assert settings.gemini.api_key is not None
        assert settings.gemini.api_key.get_secret_value() == "from-dotenv"
        assert settings.gemini.reported_model == "gemini-1.5-pro"
        assert settings.api.port == 4100
        assert settings.retry.max_attempts == 4
        assert settings.rate_limit.max_requests == 3

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("RATE_LIMIT_MAX_REQUESTS=3\n", encoding="utf-8")
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "7")

        assert Settings().rate_limit.max_requests == 7
