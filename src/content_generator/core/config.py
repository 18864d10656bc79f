"""Centralized configuration management for the Content Generator Service.

This module provides a single source of truth for all configuration values,
using pydantic-settings for environment variable loading and validation.

Design Principles:
    - Environment Variables: All settings can be overridden via environment variables
      or a .env file in the working directory (each section reads it)
    - Sensible Defaults: All settings have production-ready defaults
    - Validation: Pydantic validates all values at load time
    - Singleton Pattern: Cached settings instance via lru_cache

Configuration Sections:
    - GeminiConfig: Upstream API endpoint, credential and fixed generation parameters
    - APIConfig: FastAPI server configuration
    - RetryConfig: Retry policy for upstream calls
    - RateLimitConfig: Per-client request ceiling

Environment Variables:
    - GEMINI_*: Upstream settings (GEMINI_API_KEY carries the credential)
    - PORT / API_*: Server settings
    - VERCEL: Deployment-mode flag, set by the Vercel runtime
    - RETRY_*: Retry policy
    - RATE_LIMIT_*: Rate limiting

Usage:
    from content_generator.core.config import settings

    port = settings.api.port
    max_attempts = settings.retry.max_attempts
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_generator.client.async_client import DEFAULT_API_URL

_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class GeminiConfig(BaseSettings):
    """Upstream generative-language API configuration.

    Generation parameters are static configuration: callers of the HTTP API
    cannot change them per request.

    Attributes:
        api_key: Credential sent with every upstream call. None leaves the
            service running, but every generation fails with AccessDenied.
        api_url: Full ``generateContent`` endpoint URL.
        reported_model: Model name reported to callers in success envelopes.
        timeout: Per-attempt timeout in seconds.
        temperature / top_k / top_p / max_output_tokens: Fixed generation
            parameters sent in ``generationConfig``.
        max_prompt_chars: Longest augmented prompt accepted upstream.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="Upstream API credential")
    api_url: str = Field(default=DEFAULT_API_URL, description="generateContent endpoint")
    reported_model: str = Field(default="gemini-pro", description="Model name reported to callers")
    timeout: float = Field(
        default=30.0, gt=0.0, le=300.0, description="Per-attempt timeout (seconds)"
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    top_k: int = Field(default=40, ge=1, description="Top-k sampling")
    top_p: float = Field(default=0.95, gt=0.0, le=1.0, description="Nucleus sampling")
    max_output_tokens: int = Field(
        default=1024, ge=1, le=65536, description="Max output tokens"
    )
    max_prompt_chars: int = Field(
        default=120_000, ge=1, description="Max augmented prompt length (characters)"
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the endpoint is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            msg = "api_url must start with http:// or https://"
            raise ValueError(msg)
        return v


class APIConfig(BaseSettings):
    """FastAPI server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "API_PORT"),
        description="API server port",
    )
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", description="Logging level"
    )
    title: str = Field(default="Content Generator API", description="API title")
    version: str = Field(default="2.0.0", description="API version")
    static_dir: Path = Field(
        default=_PROJECT_ROOT / "public", description="Front-end static asset root"
    )
    cors_origins: str = Field(default="*", description="Comma-separated allowed CORS origins")
    max_request_body_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Max accepted request body (bytes)"
    )
    vercel: bool = Field(
        default=False,
        validation_alias=AliasChoices("VERCEL", "API_VERCEL"),
        description="Running on the Vercel runtime",
    )

    @property
    def environment(self) -> str:
        """Deployment mode reported by diagnostic endpoints."""
        return "vercel" if self.vercel else "local"


class RetryConfig(BaseSettings):
    """Retry policy for upstream calls."""

    model_config = SettingsConfigDict(
        env_prefix="RETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_attempts: int = Field(default=3, ge=1, le=10, description="Max upstream calls per request")
    base_delay: float = Field(
        default=1.0, ge=0.0, le=60.0, description="Delay after first failure (seconds)"
    )
    backoff_multiplier: float = Field(
        default=2.0, ge=1.0, le=10.0, description="Delay growth factor per attempt"
    )
    max_delay: float = Field(
        default=30.0, ge=0.0, le=300.0, description="Ceiling for a single backoff (seconds)"
    )


class RateLimitConfig(BaseSettings):
    """Per-client rate limit for generation endpoints."""

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    window_seconds: int = Field(default=60, ge=1, le=86400, description="Window length (seconds)")
    max_requests: int = Field(default=15, ge=1, le=100_000, description="Requests per window")


class Settings(BaseSettings):
    """Root settings class containing all configuration sections.

    Configuration is loaded from:
        1. Environment variables (with appropriate prefixes)
        2. .env file (if present in the working directory)
        3. Default values (if not set)

    Note:
        Settings are loaded once and cached. Changes to environment
        variables require an application restart to take effect.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)

    @classmethod
    @lru_cache(maxsize=1)
    def get_settings(cls) -> Settings:
        """Get cached settings instance (singleton pattern)."""
        return cls()


# Global settings instance
settings = Settings.get_settings()

__all__ = [
    "APIConfig",
    "GeminiConfig",
    "RateLimitConfig",
    "RetryConfig",
    "Settings",
    "settings",
]
