"""Config settings – env-based configuration."""
from mp_fetch.config.settings.base import Settings
from mp_fetch.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_fetch.config.settings.site import SiteSettings

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader", "SiteSettings"]
