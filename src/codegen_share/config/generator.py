"""External code generation API settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeneratorSettings(BaseSettings):
    """Gemini generateContent client settings."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATOR_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Gemini API key")
    model: str = Field(default="gemini-2.0-flash")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
    )
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_attempts: int = Field(default=3, ge=1, le=10)
