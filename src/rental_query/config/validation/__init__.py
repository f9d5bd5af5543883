"""Config validation errors."""
from rental_query.config.validation.errors import (
    ENV_PREFIX,
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    env_key_for,
)

__all__ = [
    "ConfigError",
    "ENV_PREFIX",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "env_key_for",
]
