"""Configuration file loading."""

from .settings import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILENAME,
    Settings,
    SettingsError,
    SettingsLoader,
    default_config_paths,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILENAME",
    "Settings",
    "SettingsError",
    "SettingsLoader",
    "default_config_paths",
]
