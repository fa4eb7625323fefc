"""Configuration module for codegen-share."""

from .generator import GeneratorSettings
from .limits import RateLimitSettings, SharingSettings
from .oauth import GoogleOAuthSettings
from .security import SecuritySettings
from .server import ServerSettings
from .settings import Settings, get_settings
from .storage import StorageSettings


__all__ = [
    "Settings",
    "get_settings",
    "GeneratorSettings",
    "GoogleOAuthSettings",
    "RateLimitSettings",
    "SecuritySettings",
    "ServerSettings",
    "SharingSettings",
    "StorageSettings",
]
