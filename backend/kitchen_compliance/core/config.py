"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly. This ensures:
1. Type validation at startup
2. Centralized configuration
3. Documentation of available settings
4. Proper defaults
"""

from functools import lru_cache
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Database - an empty value means no backend is configured (demo mode)
    database_url: Optional[str] = "sqlite:///./data/kitchen.db"

    # Force demo mode even when a database URL is present
    demo_mode: bool = False

    # Site used by the kiosk when no site has been chosen yet
    demo_site_id: str = "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11"

    # Compliance band applied to fridges created with a name only (Celsius)
    default_min_temp: float = 0.0
    default_max_temp: float = 5.0

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:5173,http://localhost:8000"

    # Timezone used to decide where "today" starts
    timezone: str = "Europe/Dublin"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Rate limiting
    rate_limit_enabled: bool = True

    # Observability
    correlation_ids_enabled: bool = True

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_compliance_band(self) -> "Settings":
        if self.default_min_temp >= self.default_max_temp:
            raise ValueError(
                f"DEFAULT_MIN_TEMP ({self.default_min_temp}) must be below "
                f"DEFAULT_MAX_TEMP ({self.default_max_temp})"
            )
        return self

    @property
    def backend_configured(self) -> bool:
        """True when a live database should be used instead of demo data."""
        return bool(self.database_url) and not self.demo_mode

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
