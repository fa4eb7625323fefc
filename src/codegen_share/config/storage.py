"""Storage backend settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from codegen_share.core.system import get_app_data_dir


DEFAULT_DB_PATH = get_app_data_dir() / "codegen_share.db"


class StorageSettings(BaseSettings):
    """Where accounts and shared artifacts live."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="memory keeps state for the process lifetime only",
    )
    database_path: Path = Field(
        default=DEFAULT_DB_PATH, description="SQLite file used by the sqlite backend"
    )
