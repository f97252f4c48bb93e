import numpy as np
import pytest
from PIL import Image

from conftest import make_gradient, same_pixels
from instafilter.models.filter_catalog import FILTER_CATALOG, get_descriptor
from instafilter.models.filter_model import FilterDescriptor, FilterKind, FilterParameters
from instafilter.services import process_service
from instafilter.services.process_service import ProcessService, registered_kinds


@pytest.fixture
def service() -> ProcessService:
    return ProcessService()


def test_every_catalog_kind_has_a_transform():
    assert set(registered_kinds()) == set(FILTER_CATALOG)


@pytest.mark.parametrize("kind", list(FilterKind))
def test_filters_preserve_size_and_alpha(service, gradient_rgba, kind):
    out = service.apply(gradient_rgba, get_descriptor(kind), FilterParameters())
    assert out.size == gradient_rgba.size
    assert out.mode == "RGBA"
    assert same_pixels(out.getchannel("A"), gradient_rgba.getchannel("A"))


@pytest.mark.parametrize("kind", list(FilterKind))
def test_filters_do_not_mutate_input(service, gradient_image, kind):
    before = np.asarray(gradient_image).copy()
    service.apply(gradient_image, get_descriptor(kind), FilterParameters())
    assert np.array_equal(np.asarray(gradient_image), before)


def test_rgb_input_stays_rgb(service, gradient_image):
    out = service.apply(gradient_image, get_descriptor(FilterKind.SEPIA), FilterParameters())
    assert out.mode == "RGB"


def test_unknown_transform_raises(service, gradient_image):
    descriptor = FilterDescriptor(FilterKind.SEPIA, "Sepia", frozenset())
    process_service._TRANSFORMS.pop(FilterKind.SEPIA)
    try:
        with pytest.raises(KeyError):
            service.apply(gradient_image, descriptor, FilterParameters())
    finally:
        process_service.register_transform(FilterKind.SEPIA)(process_service.sepia)


def test_sepia_zero_intensity_is_identity(gradient_image):
    assert same_pixels(process_service.sepia(gradient_image, intensity=0.0), gradient_image)


def test_sepia_full_intensity_matches_matrix():
    image = Image.new("RGB", (4, 4), (40, 120, 200))
    r, g, b = process_service.sepia(image, intensity=1.0).getpixel((0, 0))
    assert r == round(0.393 * 40 + 0.769 * 120 + 0.189 * 200)
    assert g == round(0.349 * 40 + 0.686 * 120 + 0.168 * 200)
    assert b == round(0.272 * 40 + 0.534 * 120 + 0.131 * 200)


def test_invert(gradient_image):
    out = np.asarray(process_service.invert(gradient_image)).astype(int)
    assert np.array_equal(out, 255 - np.asarray(gradient_image).astype(int))


def test_pixellate_produces_uniform_blocks(gradient_image):
    out = np.asarray(process_service.pixellate(gradient_image, scale=10))
    for by in range(0, 100, 10):
        for bx in range(0, 100, 10):
            block = out[by:by + 10, bx:bx + 10].reshape(-1, 3)
            assert (block == block[0]).all()


def test_pixellate_handles_partial_blocks():
    image = make_gradient(37, 23)
    out = process_service.pixellate(image, scale=10)
    assert out.size == (37, 23)


def test_pixellate_scale_below_one_is_identity(gradient_image):
    assert same_pixels(process_service.pixellate(gradient_image, scale=0), gradient_image)


def test_motion_blur_keeps_horizontally_uniform_rows():
    # color depends only on y, so a horizontal blur changes nothing
    pixels = np.repeat(np.arange(100, dtype=np.uint8)[:, None, None] * 2, 100, axis=1)
    image = Image.fromarray(np.repeat(pixels, 3, axis=2))
    assert same_pixels(process_service.motion_blur(image, radius=15), image)


def test_motion_blur_smooths_horizontal_gradient_edges(gradient_image):
    out = process_service.motion_blur(gradient_image, radius=30)
    assert not same_pixels(out, gradient_image)
    assert same_pixels(process_service.motion_blur(gradient_image, radius=0), gradient_image)


def test_vignette_darkens_corners_only(gradient_image):
    out = process_service.vignette(gradient_image, intensity=1.0, radius=100)
    src = np.asarray(gradient_image).astype(int)
    dst = np.asarray(out).astype(int)
    assert np.array_equal(dst[50, 50], src[50, 50])
    assert dst[99, 99].sum() < src[99, 99].sum()


def test_vignette_zero_intensity_is_identity(gradient_image):
    assert same_pixels(process_service.vignette(gradient_image, intensity=0.0, radius=0), gradient_image)


def test_crystallize_is_deterministic(gradient_image):
    a = process_service.crystallize(gradient_image, radius=12)
    b = process_service.crystallize(gradient_image, radius=12)
    assert same_pixels(a, b)
    assert not same_pixels(a, gradient_image)


def test_crystallize_large_radius_is_single_cell(gradient_image):
    out = np.asarray(process_service.crystallize(gradient_image, radius=200)).reshape(-1, 3)
    assert (out == out[0]).all()


def test_twirl_zero_radius_is_identity(gradient_image):
    assert same_pixels(process_service.twirl(gradient_image, radius=0), gradient_image)


def test_twirl_leaves_pixels_outside_radius(gradient_image):
    out = process_service.twirl(gradient_image, radius=20)
    assert not same_pixels(out, gradient_image)
    assert out.getpixel((0, 0)) == gradient_image.getpixel((0, 0))


def test_comic_posterizes_flat_areas():
    image = Image.new("RGB", (20, 20), (200, 100, 50))
    assert process_service.comic(image).getpixel((10, 10)) == (192, 96, 32)


def test_blur_filters_change_the_image(service, gradient_image):
    params = FilterParameters(radius=8)
    for kind in (FilterKind.GAUSSIAN_BLUR, FilterKind.UNSHARP_MASK):
        out = service.apply(gradient_image, get_descriptor(kind), params)
        assert out.size == gradient_image.size
    checker = Image.fromarray((np.indices((50, 50)).sum(axis=0) % 2 * 255).astype(np.uint8)).convert("RGB")
    blurred = service.apply(checker, get_descriptor(FilterKind.GAUSSIAN_BLUR), params)
    assert not same_pixels(blurred, checker)


def test_crystallize_only_uses_source_colors():
    image = make_gradient(137, 61)
    out = np.asarray(process_service.crystallize(image, radius=9))
    assert out.shape == (61, 137, 3)
    assert out.dtype == np.uint8
    source_colors = {tuple(c) for c in np.asarray(image).reshape(-1, 3)}
    assert {tuple(c) for c in out.reshape(-1, 3)} <= source_colors


def test_crystallize_cells_are_contiguous_regions():
    image = make_gradient(50, 50)
    out = np.asarray(process_service.crystallize(image, radius=10))
    # far fewer distinct colors than pixels: one per cell
    distinct = {tuple(c) for c in out.reshape(-1, 3)}
    assert len(distinct) <= 25
