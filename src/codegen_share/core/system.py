"""Platform-specific user directories."""

from pathlib import Path

import platformdirs


APP_NAME = "codegen_share"


def get_xdg_config_home() -> Path:
    """Get the user config directory using platformdirs.

    Returns:
        Path to the user config directory (cross-platform).
    """
    return Path(platformdirs.user_config_dir())


def get_xdg_data_home() -> Path:
    """Get the user data directory using platformdirs.

    Returns:
        Path to the user data directory (cross-platform).
    """
    return Path(platformdirs.user_data_dir())


def get_app_config_dir() -> Path:
    return get_xdg_config_home() / APP_NAME


def get_app_data_dir() -> Path:
    return get_xdg_data_home() / APP_NAME
