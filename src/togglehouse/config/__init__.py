"""Config – 12-factor settings and loaders."""

from togglehouse.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ServerSettings,
    Settings,
    SettingsLoader,
)
from togglehouse.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ServerSettings",
    "Settings",
    "SettingsLoader",
]
