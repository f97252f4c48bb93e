"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from PIL import Image

from instafilter.models.filter_model import FilterDescriptor, FilterParameters


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель исходного изображения и его метаданные.

    Fields:
        pil_image: Декодированное изображение PIL (RGBA).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL, например "RGBA".
        size_bytes: Размер исходных данных, если известен.
        path: Путь к файлу; None, если изображение пришло байтами.
    """
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int] = None
    path: Optional[Path] = None


@dataclass(frozen=True)
class RenderedImage:
    """Результат применения фильтра к исходному изображению.

    Хранит снимок фильтра и параметров, из которых получен, и номер поколения
    пересчёта: пайплайн показывает только результат с наибольшим номером.

    `parameters` снимается целиком на момент пересчёта, но на пиксели влияют
    только объявленные фильтром значения (`applied_parameters`). Смена
    необъявленного параметра не вызывает пересчёт, поэтому `parameters`
    может отставать от пайплайна именно в этих значениях.
    """
    pil_image: Image.Image
    descriptor: FilterDescriptor
    parameters: FilterParameters
    generation: int

    @property
    def size(self) -> tuple[int, int]:
        return self.pil_image.size

    @property
    def applied_parameters(self) -> Dict[str, float]:
        """Значения, реально переданные фильтру."""
        return self.parameters.for_filter(self.descriptor)
