"""
Application Settings.

Centralized configuration using Pydantic Settings with environment variable loading.
Settings are validated on first access; invalid values raise an error.

List values (e.g. DEFAULT_KEYWORDS) are read from the environment as JSON arrays.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keyword set used by the shop finder when the caller supplies none.
DEFAULT_KEYWORDS = [
    "ティラミス",
    "tiramisu",
    "イタリアン デザート",
    "イタリアン カフェ",
    "ケーキ屋 ティラミス",
    "パティスリー",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Google (Places API)
    # -------------------------------------------------------------------------
    google_places_api_key: SecretStr | None = Field(
        default=None, description="Google Places API key"
    )
    provider_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for a single keyword search in seconds",
    )
    provider_max_requests_per_second: int = Field(
        default=10,
        ge=1,
        description="Client-side QPS throttle for the Places API",
    )
    place_type: str | None = Field(
        default=None,
        description="Optional Places type filter (e.g. 'cafe')",
    )
    language: str = Field(default="ja", description="Result language code")

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------
    default_radius_meters: int = Field(
        default=5000,
        gt=0,
        description="Search radius used when the caller gives none",
    )
    max_radius_meters: int = Field(
        default=50000,
        gt=0,
        description="Largest accepted search radius. The client caps it at the provider limit.",
    )
    default_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_KEYWORDS),
        description="Keywords used when the caller gives none",
    )
    exclusion_rules_path: Optional[str] = Field(
        default=None,
        description="JSON file with exclusion rules. Bundled rules are used if unset.",
    )
    discovery_max_concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        description="Max concurrent keyword searches. Defaults to the keyword count.",
    )
    discovery_deadline_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Overall deadline for one discovery call",
    )
    retry_attempts: int = Field(
        default=0,
        ge=0,
        description="Attempts for timeout/rate-limit retries. 0 disables the retry wrapper.",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log renderer",
    )

    @model_validator(mode="after")
    def validate_discovery_settings(self) -> "Settings":
        """Validate that discovery defaults are usable."""
        errors = []

        if self.default_radius_meters > self.max_radius_meters:
            errors.append("default_radius_meters must not exceed max_radius_meters")

        if not any(keyword.strip() for keyword in self.default_keywords):
            errors.append("default_keywords must contain at least one keyword")

        if errors:
            raise ValueError(f"Discovery configuration errors: {'; '.join(errors)}")

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()
