"""Каталог фильтров: вид фильтра -> принимаемые параметры.

Таблица возможностей задаётся явно, пайплайн не опрашивает фильтры во время
работы. Чтобы добавить фильтр, достаточно описать его здесь и
зарегистрировать преобразование в `ProcessService`.
"""
from __future__ import annotations

from typing import Dict, Union

from instafilter.models.filter_model import FilterDescriptor, FilterKind, FilterParam

_I = FilterParam.INTENSITY
_R = FilterParam.RADIUS
_S = FilterParam.SCALE

FILTER_CATALOG: Dict[FilterKind, FilterDescriptor] = {
    d.kind: d
    for d in (
        FilterDescriptor(FilterKind.CRYSTALLIZE, "Кристаллизация", frozenset({_R})),
        FilterDescriptor(FilterKind.GAUSSIAN_BLUR, "Размытие по Гауссу", frozenset({_R})),
        FilterDescriptor(FilterKind.PIXELLATE, "Пикселизация", frozenset({_S})),
        FilterDescriptor(FilterKind.SEPIA, "Сепия", frozenset({_I})),
        FilterDescriptor(FilterKind.UNSHARP_MASK, "Нерезкое маскирование", frozenset({_I, _R})),
        FilterDescriptor(FilterKind.VIGNETTE, "Виньетка", frozenset({_I, _R})),
        FilterDescriptor(FilterKind.INVERT, "Инверсия цвета", frozenset()),
        FilterDescriptor(FilterKind.COMIC, "Комикс", frozenset()),
        FilterDescriptor(FilterKind.MOTION_BLUR, "Размытие в движении", frozenset({_R})),
        FilterDescriptor(FilterKind.TWIRL, "Закручивание", frozenset({_R})),
    )
}

DEFAULT_FILTER = FilterKind.SEPIA


def get_descriptor(kind: Union[FilterDescriptor, FilterKind, str]) -> FilterDescriptor:
    """Находит дескриптор по виду фильтра или его строковому имени.

    Raises:
        KeyError: если такого фильтра нет в каталоге.
    """
    if isinstance(kind, FilterDescriptor):
        return kind
    try:
        return FILTER_CATALOG[FilterKind(kind)]
    except ValueError:
        raise KeyError(f"Неизвестный фильтр: {kind!r}") from None


def find_by_title(title: str) -> FilterDescriptor:
    """Обратный поиск по заголовку (для выпадающего списка в UI)."""
    for descriptor in FILTER_CATALOG.values():
        if descriptor.title == title:
            return descriptor
    raise KeyError(f"Неизвестный фильтр: {title!r}")
