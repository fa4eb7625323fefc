"""Settings configuration for codegen-share."""

import contextlib
import os
import tomllib
from pathlib import Path
from typing import Any

import orjson
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codegen_share.config.discovery import find_toml_config_file
from codegen_share.exceptions import ConfigurationError

from .generator import GeneratorSettings
from .limits import RateLimitSettings, SharingSettings
from .oauth import GoogleOAuthSettings
from .security import SecuritySettings
from .server import ServerSettings
from .storage import StorageSettings


__all__ = [
    "Settings",
    "ConfigurationError",
    "get_settings",
]


OVERRIDES_ENV_VAR = "CODEGEN_SHARE_CONFIG_OVERRIDES"

_SECRET_FIELDS = {
    ("security", "session_secret"),
    ("google_oauth", "client_secret"),
    ("generator", "api_key"),
}


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None → default, dict → instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    if hasattr(value, "model_dump"):
        return settings_class(**value.model_dump())
    return value


class Settings(BaseSettings):
    """
    Configuration settings for codegen-share.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over .env file values.
    TOML configuration files are loaded in the following order:
    1. CONFIG_FILE environment variable
    2. .codegen_share.toml / codegen_share.toml in current directory
    3. ~/.config/codegen_share/config.toml
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    security: SecuritySettings = Field(
        default_factory=SecuritySettings,
        description="Session and credential security settings",
    )

    rate_limit: RateLimitSettings = Field(
        default_factory=RateLimitSettings,
        description="Per-account request quota",
    )

    sharing: SharingSettings = Field(
        default_factory=SharingSettings,
        description="Shared-artifact token and retention settings",
    )

    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="Storage backend selection",
    )

    google_oauth: GoogleOAuthSettings = Field(
        default_factory=GoogleOAuthSettings,
        description="Google federated login",
    )

    generator: GeneratorSettings = Field(
        default_factory=GeneratorSettings,
        description="External code generation API",
    )

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: Any) -> Any:
        return _coerce_settings(v, ServerSettings)

    @field_validator("security", mode="before")
    @classmethod
    def validate_security(cls, v: Any) -> Any:
        return _coerce_settings(v, SecuritySettings)

    @field_validator("rate_limit", mode="before")
    @classmethod
    def validate_rate_limit(cls, v: Any) -> Any:
        return _coerce_settings(v, RateLimitSettings)

    @field_validator("sharing", mode="before")
    @classmethod
    def validate_sharing(cls, v: Any) -> Any:
        return _coerce_settings(v, SharingSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def validate_storage(cls, v: Any) -> Any:
        return _coerce_settings(v, StorageSettings)

    @field_validator("google_oauth", mode="before")
    @classmethod
    def validate_google_oauth(cls, v: Any) -> Any:
        return _coerce_settings(v, GoogleOAuthSettings)

    @field_validator("generator", mode="before")
    @classmethod
    def validate_generator(cls, v: Any) -> Any:
        return _coerce_settings(v, GeneratorSettings)

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump model data with secrets masked."""
        data = self.model_dump(mode="json")
        for section, field in _SECRET_FIELDS:
            if data.get(section, {}).get(field):
                data[section][field] = "***"
        return data

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ValueError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Auto-discover config file or use CONFIG_FILE env var
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            if config_path.suffix.lower() != ".toml":
                raise ValueError(
                    f"Unsupported config file format: {config_path.suffix}. "
                    "Only TOML (.toml) files are supported."
                )
            config_data = cls.load_toml_config(config_path)

        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings with configuration file support.

    JSON overrides in CODEGEN_SHARE_CONFIG_OVERRIDES take precedence over the
    file (the CLI uses this to hand options to reloaded workers).

    Raises:
        ConfigurationError: If the configuration cannot be loaded or is invalid
    """
    try:
        overrides: dict[str, Any] = {}
        overrides_json = os.environ.get(OVERRIDES_ENV_VAR)
        if overrides_json:
            with contextlib.suppress(ValueError):
                overrides = orjson.loads(overrides_json)

        return Settings.from_config(config_path=config_path, **overrides)
    except (OSError, ValueError) as e:
        # pydantic.ValidationError is a ValueError subclass
        raise ConfigurationError(f"Configuration error: {e}") from e
