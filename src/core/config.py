"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./bookmarks.db"

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Field length limits for bookmark content fields
    max_url_length: int = 2048
    max_title_length: int = 500
    max_description_length: int = 2000

    # Project status policy: days since the most recent working bookmark
    project_stale_after_days: int = Field(default=7, ge=0)
    project_inactive_after_days: int = Field(default=30, ge=0)

    # Number of working topics reported in the summary stats
    project_stats_limit: int = Field(default=10, ge=1)

    # Pagination bounds enforced at the HTTP edge (the services never clamp)
    default_page_limit: int = Field(default=50, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def validate_status_thresholds(self) -> "Settings":
        """Ensure the abandonment threshold is not shorter than the staleness threshold."""
        if self.project_inactive_after_days < self.project_stale_after_days:
            raise ValueError(
                f"project_inactive_after_days ({self.project_inactive_after_days}) must be "
                f">= project_stale_after_days ({self.project_stale_after_days}).",
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
