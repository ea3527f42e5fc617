"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reference data
    location_data_path: str | None = Field(
        default=None,
        description="Path to the administrative-division JSON table (bundled sample table when unset)",
    )

    # Location search
    search_limit: int = Field(
        default=10,
        description="Maximum number of location candidates returned per search",
        gt=0,
    )
    search_debounce_ms: int = Field(
        default=300,
        description="Quiet period in milliseconds before a typed query is searched",
        ge=0,
    )

    # Backend
    backend_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the registration backend (phone check and persistence)",
    )
    backend_timeout: float = Field(
        default=10.0,
        description="Backend request timeout in seconds",
        gt=0,
    )

    @field_validator("backend_base_url")
    @classmethod
    def validate_backend_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = "backend_base_url must be an http(s) URL"
            raise ValueError(msg)
        return v.rstrip("/")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    @property
    def search_debounce_seconds(self) -> float:
        """Debounce quiet period expressed in seconds."""
        return self.search_debounce_ms / 1000


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
