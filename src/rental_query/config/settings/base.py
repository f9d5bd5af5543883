"""Config settings – ClientSettings for the query layer."""
from __future__ import annotations

import dataclasses
from typing import ClassVar
from urllib.parse import urlsplit

from rental_query.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for env-driven settings dataclasses."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class ClientSettings(Settings):
    """Connection, cache and search tuning for :class:`RentalQueryClient`.

    ``ttl_overrides`` is a comma list of ``resource=seconds`` pairs, e.g.
    ``"properties=60,reviews=30"``.
    """

    _prefix: ClassVar[str] = "RENTAL_QUERY"

    base_url: str
    timeout_seconds: float = 10.0
    max_attempts: int = 3
    debounce_seconds: float = 0.3
    default_page_size: int = 20
    log_level: str = "INFO"
    log_json: bool = True
    ttl_overrides: str = ""

    def _validate(self) -> None:
        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidSettingValueError("base_url", self.base_url, "must be an absolute http(s) URL")
        if self.timeout_seconds <= 0:
            raise InvalidSettingValueError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.max_attempts < 1:
            raise InvalidSettingValueError("max_attempts", self.max_attempts, "must be at least 1")
        if self.debounce_seconds < 0:
            raise InvalidSettingValueError("debounce_seconds", self.debounce_seconds, "must not be negative")
        if self.default_page_size < 1:
            raise InvalidSettingValueError("default_page_size", self.default_page_size, "must be at least 1")
        self.ttl_map()

    def ttl_map(self) -> dict[str, float]:
        """Parse ``ttl_overrides`` into ``{resource: seconds}``."""
        result: dict[str, float] = {}
        for chunk in self.ttl_overrides.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            name, sep, raw = chunk.partition("=")
            try:
                seconds = float(raw)
            except ValueError:
                seconds = -1.0
            if not sep or not name.strip() or seconds <= 0:
                raise InvalidSettingValueError("ttl_overrides", chunk, "expected resource=<positive seconds>")
            result[name.strip()] = seconds
        return result


__all__ = ["ClientSettings", "Settings"]
