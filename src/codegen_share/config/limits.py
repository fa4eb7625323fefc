"""Quota and shared-artifact retention settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitSettings(BaseSettings):
    """Fixed-window request quota applied to every account."""

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
        extra="ignore",
    )

    ceiling: int = Field(
        default=50, ge=1, description="Requests allowed per account per window"
    )
    reset_interval_seconds: int = Field(
        default=60, ge=1, description="Length of the fixed window"
    )


class SharingSettings(BaseSettings):
    """Shared-artifact token and retention settings."""

    model_config = SettingsConfigDict(
        env_prefix="SHARING_",
        case_sensitive=False,
        extra="ignore",
    )

    retention_days: int = Field(
        default=30, ge=1, le=365, description="Days a shared artifact stays visible"
    )
    share_id_length: int = Field(
        default=12,
        ge=11,
        le=32,
        description="Token length; 11 symbols of a 57-letter alphabet exceed 64 bits",
    )
    sweep_interval_seconds: int = Field(
        default=60 * 60, ge=1, description="Interval of the expired-artifact sweep"
    )
    max_publish_attempts: int = Field(
        default=5, ge=1, le=20, description="Token collisions tolerated per publish"
    )
