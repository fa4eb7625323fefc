"""Session and credential security settings."""

import secrets
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecuritySettings(BaseSettings):
    """Security-specific configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_",
        case_sensitive=False,
        extra="ignore",
    )

    session_secret: str | None = Field(
        default=None,
        description="Secret key for signing session tokens (auto-generated if not set)",
    )

    session_secret_generated: bool = Field(
        default=False,
        description="Whether the session secret was auto-generated",
    )

    session_max_age_seconds: int = Field(
        default=24 * 60 * 60,
        ge=60,
        description="Lifetime of a regular session",
    )

    remember_max_age_seconds: int = Field(
        default=30 * 24 * 60 * 60,
        ge=60,
        description="Lifetime of a remember-me session",
    )

    cookie_name: str = Field(default="codegen_session", min_length=1)
    cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS (enable in production)",
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(default="lax")

    scrypt_cost: int = Field(
        default=2**14,
        ge=2**10,
        description="scrypt CPU/memory cost parameter N (power of two)",
    )

    @model_validator(mode="after")
    def ensure_session_secret(self) -> "SecuritySettings":
        """Generate a session secret if none was configured."""
        if not self.session_secret:
            self.session_secret = secrets.token_hex(32)
            self.session_secret_generated = True
        if self.scrypt_cost & (self.scrypt_cost - 1):
            raise ValueError("scrypt_cost must be a power of two")
        return self
