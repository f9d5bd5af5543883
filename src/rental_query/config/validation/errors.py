"""Config validation – errors raised while building ClientSettings."""
from __future__ import annotations

from rental_query.kernel.errors import ApplicationError

ENV_PREFIX = "RENTAL_QUERY"


def env_key_for(setting_name: str) -> str:
    """``base_url`` -> ``RENTAL_QUERY_BASE_URL``; env keys pass through."""
    if setting_name.isupper():
        return setting_name
    return f"{ENV_PREFIX}_{setting_name.upper()}"


class ConfigError(ApplicationError):
    """The client cannot be wired from its settings sources."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """No loader or override supplied a required field (``base_url``)."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        self.setting_name = setting_name
        self.env_key = env_key_for(setting_name)
        super().__init__(
            f"rental-query needs '{setting_name}': set {self.env_key} or pass it as an override",
            detail={"setting": setting_name, "env_key": self.env_key},
        )


class InvalidSettingValueError(ConfigError):
    """A client setting is present but unusable, e.g. a non-positive TTL."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        self.setting_name = setting_name
        self.env_key = env_key_for(setting_name)
        self.value = value
        self.reason = reason
        super().__init__(
            f"{self.env_key}={value!r} rejected: {reason}",
            detail={"setting": setting_name, "env_key": self.env_key, "reason": reason},
        )


__all__ = [
    "ConfigError",
    "ENV_PREFIX",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "env_key_for",
]
