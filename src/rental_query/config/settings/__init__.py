"""Config settings – env-based configuration."""
from rental_query.config.settings.base import ClientSettings, Settings
from rental_query.config.settings.factory import SettingsFactory
from rental_query.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "ClientSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
