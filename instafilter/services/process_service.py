"""Фильтры изображений: одно преобразование Pillow/numpy на каждый вид фильтра.

Принципы:
- SRP: только математика над пикселями, без состояния и UI.
- OCP: новое преобразование добавляется декоратором `register_transform`.
Все преобразования сохраняют размеры и альфа-канал и не мутируют вход.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Tuple

import numpy as np
from PIL import Image, ImageFilter, ImageOps

from instafilter.models.filter_model import FilterDescriptor, FilterKind, FilterParam, FilterParameters

Transform = Callable[..., Image.Image]

_TRANSFORMS: Dict[FilterKind, Transform] = {}

_CRYSTALLIZE_SEED = 1337
_TWIRL_ANGLE = math.pi
_COMIC_EDGE_THRESHOLD = 40
_SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)


def register_transform(kind: FilterKind) -> Callable[[Transform], Transform]:
    """Регистрирует функцию `f(rgb, **params) -> rgb` для вида фильтра.

    Имена keyword-аргументов функции совпадают с параметрами из каталога.
    """
    def decorator(func: Transform) -> Transform:
        _TRANSFORMS[kind] = func
        return func
    return decorator


def registered_kinds() -> Tuple[FilterKind, ...]:
    return tuple(_TRANSFORMS)


class ProcessService:
    def apply(self, image: Image.Image, descriptor: FilterDescriptor, params: FilterParameters) -> Image.Image:
        """Применяет фильтр к изображению.

        В преобразование передаются только параметры, объявленные дескриптором.

        Raises:
            KeyError: если для вида фильтра не зарегистрировано преобразование.
        """
        transform = _TRANSFORMS.get(descriptor.kind)
        if transform is None:
            raise KeyError(f"Нет преобразования для фильтра: {descriptor.kind.value}")
        rgb, alpha = _split_alpha(image)
        result = transform(rgb, **params.for_filter(descriptor))
        return _merge_alpha(result, alpha)


# ---------- Вспомогательные функции ----------
def _split_alpha(image: Image.Image) -> Tuple[Image.Image, Optional[Image.Image]]:
    if image.mode == "RGBA":
        return image.convert("RGB"), image.getchannel("A")
    if image.mode == "RGB":
        return image.copy(), None
    return image.convert("RGB"), None


def _merge_alpha(rgb: Image.Image, alpha: Optional[Image.Image]) -> Image.Image:
    if alpha is None:
        return rgb
    out = rgb.convert("RGBA")
    out.putalpha(alpha)
    return out


def _to_array(rgb: Image.Image) -> np.ndarray:
    """RGB -> float32 массив (H, W, 3) в диапазоне [0, 255]."""
    return np.asarray(rgb, dtype=np.float32)


def _from_array(arr: np.ndarray) -> Image.Image:
    return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))


# ---------- Цвет ----------
@register_transform(FilterKind.SEPIA)
def sepia(rgb: Image.Image, intensity: float) -> Image.Image:
    """Матрица сепии, смешанная с оригиналом в пропорции `intensity`."""
    arr = _to_array(rgb)
    toned = arr @ _SEPIA_MATRIX.T
    return _from_array(arr + (toned - arr) * float(intensity))


@register_transform(FilterKind.INVERT)
def invert(rgb: Image.Image) -> Image.Image:
    return ImageOps.invert(rgb)


@register_transform(FilterKind.COMIC)
def comic(rgb: Image.Image) -> Image.Image:
    """Постеризация цветов плюс тёмные контуры по границам."""
    poster = ImageOps.posterize(rgb, 3)
    edges = rgb.convert("L").filter(ImageFilter.FIND_EDGES)
    outline = edges.point(lambda v: 255 if v > _COMIC_EDGE_THRESHOLD else 0)
    poster.paste((0, 0, 0), mask=outline)
    return poster


@register_transform(FilterKind.VIGNETTE)
def vignette(rgb: Image.Image, intensity: float, radius: float) -> Image.Image:
    """Радиальное затемнение к краям.

    `radius` (0..200) задаёт, с какой доли полудиагонали начинается спад.
    """
    arr = _to_array(rgb)
    h, w = arr.shape[:2]
    yy, xx = np.mgrid[0:h, 0:w].astype(np.float32)
    cy, cx = (h - 1) / 2.0, (w - 1) / 2.0
    half_diag = max(math.hypot(cx, cy), 1.0)
    dist = np.hypot(yy - cy, xx - cx) / half_diag

    start = min(float(radius) / FilterParam.RADIUS.maximum, 1.0)
    span = max(1.0 - start, 1e-6)
    falloff = np.clip((dist - start) / span, 0.0, 1.0) ** 2
    return _from_array(arr * (1.0 - float(intensity) * falloff)[..., None])


# ---------- Размытие и резкость ----------
@register_transform(FilterKind.GAUSSIAN_BLUR)
def gaussian_blur(rgb: Image.Image, radius: float) -> Image.Image:
    return rgb.filter(ImageFilter.GaussianBlur(radius=float(radius)))


@register_transform(FilterKind.UNSHARP_MASK)
def unsharp_mask(rgb: Image.Image, intensity: float, radius: float) -> Image.Image:
    percent = int(round(float(intensity) * 200))
    return rgb.filter(ImageFilter.UnsharpMask(radius=float(radius), percent=percent, threshold=0))


@register_transform(FilterKind.MOTION_BLUR)
def motion_blur(rgb: Image.Image, radius: float) -> Image.Image:
    """Горизонтальное скользящее среднее длиной `radius` px (через кумулятивные суммы)."""
    length = int(round(float(radius)))
    if length <= 1:
        return rgb.copy()
    arr = _to_array(rgb)
    h, w = arr.shape[:2]
    left = length // 2
    right = length - 1 - left
    padded = np.pad(arr, ((0, 0), (left, right), (0, 0)), mode="edge")
    csum = np.cumsum(padded, axis=1, dtype=np.float64)
    csum = np.concatenate([np.zeros((h, 1, 3), dtype=np.float64), csum], axis=1)
    out = (csum[:, length:length + w] - csum[:, 0:w]) / length
    return _from_array(out)


# ---------- Геометрия ----------
@register_transform(FilterKind.PIXELLATE)
def pixellate(rgb: Image.Image, scale: float) -> Image.Image:
    """Квадратные блоки размера `scale`, цвет блока = среднее по блоку."""
    block = max(1, int(round(float(scale))))
    if block == 1:
        return rgb.copy()
    arr = _to_array(rgb)
    h, w = arr.shape[:2]
    rows, cols = -(-h // block), -(-w // block)
    padded = np.pad(arr, ((0, rows * block - h), (0, cols * block - w), (0, 0)), mode="edge")
    means = padded.reshape(rows, block, cols, block, 3).mean(axis=(1, 3))
    out = np.repeat(np.repeat(means, block, axis=0), block, axis=1)[:h, :w]
    return _from_array(out)


@register_transform(FilterKind.CRYSTALLIZE)
def crystallize(rgb: Image.Image, radius: float) -> Image.Image:
    """Ячейки Вороного на «дрожащей» сетке с шагом `radius`.

    Каждый пиксель получает цвет ближайшего центра; центр ищется только среди
    3x3 соседних ячеек сетки. Генератор с фиксированным seed делает результат
    воспроизводимым. Полноразмерных буферов немного: float32 расстояния и
    индекс ближайшего центра, обновляемые на месте.
    """
    cell = max(1, int(round(float(radius))))
    src = np.asarray(rgb)
    h, w = src.shape[:2]
    rows, cols = -(-h // cell), -(-w // cell)

    rng = np.random.default_rng(_CRYSTALLIZE_SEED)
    seeds_y = np.clip((np.arange(rows)[:, None] + rng.random((rows, cols))) * cell, 0, h - 1).astype(np.float32)
    seeds_x = np.clip((np.arange(cols)[None, :] + rng.random((rows, cols))) * cell, 0, w - 1).astype(np.float32)

    # row/column vectors broadcast to (h, w) only inside the distance expression
    yy = np.arange(h, dtype=np.float32)[:, None]
    xx = np.arange(w, dtype=np.float32)[None, :]
    cy = (np.arange(h) // cell)[:, None]
    cx = (np.arange(w) // cell)[None, :]

    best_d = np.full((h, w), np.inf, dtype=np.float32)
    best = np.zeros((h, w), dtype=np.intp)
    d = np.empty((h, w), dtype=np.float32)
    closer = np.empty((h, w), dtype=bool)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            ny = np.clip(cy + dy, 0, rows - 1)
            nx = np.clip(cx + dx, 0, cols - 1)
            np.add(np.square(yy - seeds_y[ny, nx]), np.square(xx - seeds_x[ny, nx]), out=d)
            np.less(d, best_d, out=closer)
            np.copyto(best_d, d, where=closer)
            np.copyto(best, ny * cols + nx, where=closer)

    seed_rows = seeds_y.astype(np.intp).ravel()
    seed_cols = seeds_x.astype(np.intp).ravel()
    return Image.fromarray(src[seed_rows[best], seed_cols[best]])


@register_transform(FilterKind.TWIRL)
def twirl(rgb: Image.Image, radius: float) -> Image.Image:
    """Закручивание вокруг центра: угол максимален в центре и падает до 0 на `radius`."""
    r = float(radius)
    if r <= 0:
        return rgb.copy()
    arr = _to_array(rgb)
    h, w = arr.shape[:2]
    yy, xx = np.mgrid[0:h, 0:w].astype(np.float64)
    cy, cx = (h - 1) / 2.0, (w - 1) / 2.0
    dy, dx = yy - cy, xx - cx
    dist = np.hypot(dx, dy)
    theta = _TWIRL_ANGLE * np.clip(1.0 - dist / r, 0.0, 1.0)
    angle = np.arctan2(dy, dx) + theta
    src_x = np.clip(np.rint(cx + dist * np.cos(angle)), 0, w - 1).astype(np.intp)
    src_y = np.clip(np.rint(cy + dist * np.sin(angle)), 0, h - 1).astype(np.intp)
    return _from_array(arr[src_y, src_x])
