"""
Configuration Management
Loads and validates environment variables using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from pydantic import Field, validator


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.
    Uses .env file in development, environment variables in production.
    """

    # Application
    app_name: str = Field(default="geoproximity", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Geohash Settings
    # 12 chars ≈ 3.7cm x 1.9cm cells
    geohash_precision: int = Field(default=12, alias="GEOHASH_PRECISION")

    # Proximity queries
    proximity_default_limit: int = Field(default=10, alias="PROXIMITY_DEFAULT_LIMIT")
    proximity_over_fetch: float = Field(default=1.0, alias="PROXIMITY_OVER_FETCH")
    nearby_default_limit: int = Field(default=100, alias="NEARBY_DEFAULT_LIMIT")

    # Supabase (optional, only needed by SupabaseRangeProvider)
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_key: str = Field(default="", alias="SUPABASE_KEY")
    places_table: str = Field(default="places", alias="PLACES_TABLE")

    @validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(LOG_LEVELS)}")
        return v

    @validator("geohash_precision")
    def validate_precision(cls, v: int) -> int:
        # 22 chars exhausts double precision on both axes
        if not 1 <= v <= 22:
            raise ValueError("Geohash precision must be between 1 and 22")
        return v

    @validator("proximity_default_limit", "nearby_default_limit")
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Default limits must be positive")
        return v

    @validator("proximity_over_fetch")
    def validate_over_fetch(cls, v: float) -> float:
        if v < 1:
            raise ValueError("Over-fetch factor must be at least 1.0")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance.
    """
    return settings
