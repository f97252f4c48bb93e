import io

import numpy as np
import pytest
from PIL import Image

from instafilter.services.filter_pipeline import FilterPipeline


def make_gradient(width: int = 100, height: int = 100) -> Image.Image:
    """Opaque RGB image where every channel varies, so any filter changes it."""
    yy, xx = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[..., 0] = (xx * 255 // max(width - 1, 1)).astype(np.uint8)
    pixels[..., 1] = (yy * 255 // max(height - 1, 1)).astype(np.uint8)
    pixels[..., 2] = 128
    return Image.fromarray(pixels)


def to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def same_pixels(a: Image.Image, b: Image.Image) -> bool:
    return a.size == b.size and np.array_equal(np.asarray(a), np.asarray(b))


@pytest.fixture
def gradient_image() -> Image.Image:
    return make_gradient()


@pytest.fixture
def gradient_rgba() -> Image.Image:
    """Gradient with a non-trivial alpha channel."""
    image = make_gradient().convert("RGBA")
    alpha = Image.linear_gradient("L").resize(image.size)
    image.putalpha(alpha)
    return image


@pytest.fixture
def gradient_bytes() -> bytes:
    return to_png_bytes(make_gradient())


@pytest.fixture
def pipeline() -> FilterPipeline:
    return FilterPipeline()
