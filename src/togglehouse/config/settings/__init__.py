"""Config settings – 12-factor env-based configuration."""
from togglehouse.config.settings.base import ServerSettings, Settings
from togglehouse.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "ServerSettings", "Settings", "SettingsLoader"]
