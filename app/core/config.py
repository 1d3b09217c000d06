"""Application configuration via Pydantic Settings v2."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "ClaimCheck"
    app_env: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # API
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = 8123
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Store (Supabase / PostgREST)
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL"),
    )
    supabase_service_role_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY"),
    )

    # Seeder
    seeder_request_timeout_seconds: float = 30.0
    seeder_dataset_path: str | None = None
    seeder_demo_marker_path: str = "metadata->demo_data"
    seeder_allow_production: bool = False

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the store URL so REST paths can be appended."""
        return v.strip().rstrip("/")

    @field_validator("seeder_request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject non-positive request timeouts.

        Args:
            v: Timeout in seconds.

        Returns:
            Validated timeout.

        Raises:
            ValueError: If the timeout is zero or negative.
        """
        if v <= 0:
            raise ValueError(f"Request timeout must be positive, got {v}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def has_store_credentials(self) -> bool:
        """Check if both store credentials are present."""
        return bool(self.supabase_url and self.supabase_service_role_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
