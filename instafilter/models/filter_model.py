"""Модели фильтров: виды, дескрипторы и числовые параметры.

Принципы:
- SRP: только структуры данных и их инварианты (диапазоны параметров).
- OCP: новый вид фильтра описывается новым дескриптором, модели не меняются.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Tuple, Union


class FilterParam(str, Enum):
    """Настраиваемые параметры фильтров."""
    INTENSITY = "intensity"
    RADIUS = "radius"
    SCALE = "scale"

    @property
    def bounds(self) -> Tuple[float, float]:
        return _PARAM_BOUNDS[self]

    @property
    def minimum(self) -> float:
        return _PARAM_BOUNDS[self][0]

    @property
    def maximum(self) -> float:
        return _PARAM_BOUNDS[self][1]

    def clamp(self, value: float) -> float:
        lo, hi = _PARAM_BOUNDS[self]
        return max(lo, min(hi, float(value)))

    @classmethod
    def parse(cls, name: Union["FilterParam", str]) -> "FilterParam":
        """Приводит имя параметра к `FilterParam`.

        Raises:
            ValueError: если параметр с таким именем не существует.
        """
        if isinstance(name, FilterParam):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f"Неизвестный параметр фильтра: {name!r}") from None


_PARAM_BOUNDS: Dict[FilterParam, Tuple[float, float]] = {
    FilterParam.INTENSITY: (0.0, 1.0),
    FilterParam.RADIUS: (0.0, 200.0),
    FilterParam.SCALE: (0.0, 100.0),
}


class FilterKind(str, Enum):
    """Виды фильтров из фиксированного каталога."""
    CRYSTALLIZE = "crystallize"
    GAUSSIAN_BLUR = "gaussian_blur"
    PIXELLATE = "pixellate"
    SEPIA = "sepia"
    UNSHARP_MASK = "unsharp_mask"
    VIGNETTE = "vignette"
    INVERT = "invert"
    COMIC = "comic"
    MOTION_BLUR = "motion_blur"
    TWIRL = "twirl"


@dataclass(frozen=True)
class FilterDescriptor:
    """Вид фильтра и набор параметров, которые он принимает."""
    kind: FilterKind
    title: str
    params: FrozenSet[FilterParam] = field(default_factory=frozenset)

    def supports(self, param: Union[FilterParam, str]) -> bool:
        return FilterParam.parse(param) in self.params


@dataclass(frozen=True)
class FilterParameters:
    """Текущие значения intensity/radius/scale.

    Значения всегда лежат в допустимых диапазонах. Лишние для конкретного
    фильтра параметры хранятся, но при рендеринге игнорируются.
    """
    intensity: float = 0.5
    radius: float = 100.0
    scale: float = 50.0

    def __post_init__(self) -> None:
        for param in FilterParam:
            object.__setattr__(self, param.value, param.clamp(getattr(self, param.value)))

    def get(self, param: Union[FilterParam, str]) -> float:
        return getattr(self, FilterParam.parse(param).value)

    def with_value(self, param: Union[FilterParam, str], value: float) -> "FilterParameters":
        """Возвращает копию с обновлённым (и ограниченным диапазоном) значением."""
        param = FilterParam.parse(param)
        return replace(self, **{param.value: param.clamp(value)})

    def for_filter(self, descriptor: FilterDescriptor) -> Dict[str, float]:
        """Только те значения, которые объявлены дескриптором фильтра."""
        return {param.value: getattr(self, param.value) for param in descriptor.params}
