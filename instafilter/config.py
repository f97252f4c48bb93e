"""Настройки приложения из переменных окружения.

Переменные читаются после `load_dotenv()`, поэтому их можно положить в `.env`
рядом с приложением:

    INSTAFILTER_LOG_LEVEL=DEBUG
    INSTAFILTER_DEFAULT_FILTER=pixellate
    INSTAFILTER_INTENSITY=0.5
    INSTAFILTER_RADIUS=100
    INSTAFILTER_SCALE=50
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from instafilter.models.filter_catalog import DEFAULT_FILTER, get_descriptor
from instafilter.models.filter_model import FilterDescriptor, FilterParameters

# Load environment variables
load_dotenv()

_PREFIX = "INSTAFILTER_"


def _env(name: str, default: str) -> str:
    return os.getenv(_PREFIX + name, default)


@dataclass(frozen=True)
class AppConfig:
    """Неизменяемый снимок настроек."""
    log_level: str = "INFO"
    default_filter: str = DEFAULT_FILTER.value
    intensity: float = 0.5
    radius: float = 100.0
    scale: float = 50.0

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Собирает настройки из окружения.

        Raises:
            ValueError: если числовое значение не парсится.
        """
        return cls(
            log_level=_env("LOG_LEVEL", cls.log_level).upper(),
            default_filter=_env("DEFAULT_FILTER", cls.default_filter).lower(),
            intensity=float(_env("INTENSITY", str(cls.intensity))),
            radius=float(_env("RADIUS", str(cls.radius))),
            scale=float(_env("SCALE", str(cls.scale))),
        )

    def default_parameters(self) -> FilterParameters:
        return FilterParameters(intensity=self.intensity, radius=self.radius, scale=self.scale)

    def default_descriptor(self) -> FilterDescriptor:
        """Raises `KeyError`, если в окружении указан неизвестный фильтр."""
        return get_descriptor(self.default_filter)
