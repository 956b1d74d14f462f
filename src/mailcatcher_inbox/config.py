"""Configuration management for mailcatcher-inbox.

This module handles client configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keyword options forwarded to httpx.Client. base_url and timeout are owned by
# the client itself.
ALLOWED_HTTP_OPTIONS = frozenset(
    {
        "auth",
        "cert",
        "cookies",
        "follow_redirects",
        "headers",
        "params",
        "proxy",
        "trust_env",
        "verify",
    }
)


class Settings(BaseSettings):
    """Client settings with environment variable support.

    All settings can be overridden via environment variables with
    the MAILCATCHER_ prefix (e.g., MAILCATCHER_PORT).
    """

    model_config = SettingsConfigDict(
        env_prefix="MAILCATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Capture server
    url: str = Field(
        default="http://127.0.0.1",
        description="Base URL of the MailCatcher HTTP interface, without port",
    )
    port: int = Field(
        default=1080,
        ge=1,
        le=65535,
        description="Port of the MailCatcher HTTP interface",
    )
    http_options: dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Extra httpx.Client options (headers, proxy, verify, ...). "
            "Provide as JSON when set from the environment."
        ),
    )

    # Scenario lifecycle
    delete_emails_after_scenario: bool = Field(
        default=False,
        description="Delete all captured emails after each test scenario",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"url must start with http:// or https://, got {value!r}")
        return value

    @field_validator("http_options")
    @classmethod
    def check_http_options(cls, value: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(value) - ALLOWED_HTTP_OPTIONS)
        if unknown:
            raise ValueError(f"unsupported http_options: {', '.join(unknown)}")
        return value

    @property
    def base_url(self) -> str:
        """Base address of the capture server, e.g. ``http://127.0.0.1:1080``."""
        return f"{self.url.strip('/')}:{self.port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached client settings.

    Returns:
        Settings: Client settings instance.
    """
    return Settings()
