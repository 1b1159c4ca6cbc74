"""Configuration management for the priority dispatch service."""

from functools import lru_cache
from typing import Literal

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

    # API Configuration
    api_port: int = Field(default=8000, description="API server port")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_workers: int = Field(default=4, description="Number of API workers")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Ranking Settings
    max_candidate_distance_km: float = Field(
        default=15.0, ge=0, description="Drivers further than this are never ranked"
    )
    proximity_radius_km: float = Field(
        default=10.0, gt=0, description="Radius inside which proximity bonus applies"
    )

    # Priority Settings
    priority_duration_days: int = Field(
        default=30, gt=0, description="Default lifetime of a manual priority upgrade"
    )
    high_rating_threshold: float = Field(
        default=4.8, ge=0, le=5, description="Rating counted as high in priority stats"
    )

    # Assignment Settings
    offer_timeout_seconds: int = Field(
        default=30, gt=0, description="Seconds a driver has to answer an offer"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
