"""Configuration file discovery."""

from pathlib import Path

from codegen_share.core.system import get_app_config_dir


CONFIG_FILE_NAMES = (".codegen_share.toml", "codegen_share.toml")


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file.

    Searches in the following order:
    1. .codegen_share.toml in current directory
    2. codegen_share.toml in current directory
    3. config.toml in the user config directory (platform-specific)
    """
    candidates = [Path(name).resolve() for name in CONFIG_FILE_NAMES]
    candidates.append(get_app_config_dir() / "config.toml")

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None
