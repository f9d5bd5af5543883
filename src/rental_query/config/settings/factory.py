"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from rental_query.config.settings.base import Settings
from rental_query.config.settings.loaders import SettingsLoader
from rental_query.config.validation.errors import (
    ConfigError,
    MissingRequiredSettingError,
)
from rental_query.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

logger = get_logger(__name__)


class SettingsFactory:
    """Merge outputs from multiple loaders, apply overrides, and construct
    a settings dataclass in one step.

    Loaders are applied in order; later loaders override earlier ones for
    overlapping fields. *overrides* take the highest priority. A loader
    that cannot produce a complete instance on its own (for example the
    environment lacks ``base_url`` but an override supplies it) is skipped
    and logged.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Raises
        ------
        MissingRequiredSettingError
            When a required field is absent after all sources were merged.
        InvalidSettingValueError
            When a merged value fails ``_validate``.
        ConfigError
            On any other construction failure.
        """
        merged: dict[str, Any] = {}

        for loader in loaders or []:
            try:
                instance = loader.load(settings_cls)
            except ConfigError as exc:
                logger.debug("settings.loader_skipped", loader=type(loader).__name__, reason=exc.message)
                continue
            for field in dataclasses.fields(instance):  # type: ignore[arg-type]
                merged[field.name] = getattr(instance, field.name)

        if overrides:
            merged.update(overrides)

        for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
            if field.name in merged:
                continue
            if (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
            ):
                raise MissingRequiredSettingError(field.name)

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}") from exc


__all__ = ["SettingsFactory"]
