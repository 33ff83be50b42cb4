"""Versioning configuration using pydantic-settings.

All values can be overridden with ``API_VERSIONING_``-prefixed environment
variables or a ``.env`` file, e.g. ``API_VERSIONING_HEADER_NAME=X-Version``.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .sources import DEFAULT_READERS, VersionSourceKind


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class VersioningSettings(BaseSettings):
    """API versioning settings."""

    model_config = SettingsConfigDict(
        env_prefix="API_VERSIONING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Readers
    header_name: str = Field("X-Api-Version", description="Header carrying the API version")
    query_param: str = Field("api-version", description="Query parameter carrying the API version")
    url_pattern: str = Field(
        r"^/api/v(?P<version>[0-9][^/]*)(?:/|$)",
        description="Regex with a 'version' group applied to the request path",
    )
    readers: list[VersionSourceKind] = Field(
        default_factory=lambda: list(DEFAULT_READERS),
        description="Order in which version sources are consulted",
    )

    # Defaults
    default_version: str | None = Field("1.0", description="Version assumed when none is given")
    assume_default_when_unspecified: bool = Field(
        True, description="Fall back to the default version when the request has none"
    )

    # Reporting
    report_api_versions: bool = Field(
        True, description="Add api-supported-versions/api-deprecated-versions headers"
    )

    # Logging
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: str = Field("console", description="Log format: 'console' or 'json'")

    @field_validator("url_pattern")
    @classmethod
    def validate_url_pattern(cls, v: str) -> str:
        """Require the named group the URL reader extracts."""
        if "(?P<version>" not in v:
            raise ValueError("url_pattern must contain a named group 'version'")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"console", "json"}:
            raise ValueError("log_format must be 'console' or 'json'")
        return v


# Global settings instance
_settings: VersioningSettings | None = None


def get_settings() -> VersioningSettings:
    """Get global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = VersioningSettings()  # type: ignore[call-arg]
    return _settings


def reset_settings() -> None:
    """Reset settings (mainly for testing)."""
    global _settings
    _settings = None
