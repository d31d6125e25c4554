"""Library configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SharePoint site
    sharepoint_web_url: str = ""  # Absolute web URL, e.g. https://tenant/sites/team
    sharepoint_request_digest: str = ""  # Optional digest embedded in the hosting page

    # HTTP transport
    http_timeout: float = 30.0  # seconds
    verify_ssl: bool = True

    # JSON document store
    document_list_name: str = "JSON-Settings"

    # Application
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper() if isinstance(v, str) else "INFO"

    @field_validator("sharepoint_web_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop trailing slashes so endpoint paths join cleanly."""
        return v.strip().rstrip("/") if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_site_settings(self) -> "Settings":
        """Validate site settings based on environment."""
        if self.http_timeout <= 0:
            raise ValueError("HTTP_TIMEOUT must be greater than zero")

        if self.environment == "production" and not self.sharepoint_web_url:
            raise ValueError("SHAREPOINT_WEB_URL is required in production")

        if self.sharepoint_web_url and not self.sharepoint_web_url.startswith(
            ("http://", "https://")
        ):
            raise ValueError("SHAREPOINT_WEB_URL must be an absolute http(s) URL")

        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_sharepoint_configured(self) -> bool:
        """Check if a SharePoint web URL is available."""
        return bool(self.sharepoint_web_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
