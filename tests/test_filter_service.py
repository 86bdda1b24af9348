import numpy as np
import pytest

from conftest import rgba
from sharpener.models.image_model import FilterSettings, ToneSettings
from sharpener.services.filter_service import apply_tone, box_blur, sharpen, unsharp_mask


# ---------- box blur ----------
def test_box_blur_interior_mean_and_untouched_border(spot_image):
    blurred = box_blur(spot_image, 1)
    assert (blurred[1:4, 1:4, :3] == 111).all()
    border = np.ones((5, 5), dtype=bool)
    border[1:4, 1:4] = False
    assert (blurred[border] == spot_image[border]).all()


def test_box_blur_exact_window_mean():
    pixels = rgba(3, 3)
    pixels[..., 0] = np.arange(9, dtype=np.uint8).reshape(3, 3) * 10
    blurred = box_blur(pixels, 1)
    assert blurred[1, 1, 0] == 40
    assert blurred[1, 1, 1] == 128


def test_box_blur_leaves_alpha(noisy_image):
    blurred = box_blur(noisy_image, 2)
    assert np.array_equal(blurred[..., 3], noisy_image[..., 3])


def test_box_blur_radius_zero_is_copy(noisy_image):
    blurred = box_blur(noisy_image, 0)
    assert np.array_equal(blurred, noisy_image)
    assert blurred is not noisy_image


def test_box_blur_image_smaller_than_window_unchanged(noisy_image):
    small = noisy_image[:4, :4].copy()
    assert np.array_equal(box_blur(small, 2), small)


def test_box_blur_rejects_bad_input(noisy_image):
    with pytest.raises(ValueError):
        box_blur(noisy_image, -1)
    with pytest.raises(ValueError):
        box_blur(noisy_image[..., :3].copy(), 1)
    with pytest.raises(ValueError):
        box_blur(noisy_image.astype(np.float32), 1)


# ---------- unsharp mask ----------
def test_unsharp_mask_spot(spot_image):
    out = sharpen(spot_image, FilterSettings(strength=100, radius=1, threshold=0))
    assert tuple(out[2, 2]) == (255, 255, 255, 255)
    ring = out[1:4, 1:4, :3].copy()
    ring[1, 1] = 89
    assert (ring == 89).all()
    assert (out[0, :, :3] == 100).all()


def test_unsharp_mask_partial_strength_rounds(spot_image):
    out = sharpen(spot_image, FilterSettings(strength=30, radius=1, threshold=0))
    assert out[2, 2, 0] == 227
    assert out[1, 1, 0] == 97


def test_threshold_gates_small_differences(spot_image):
    out = sharpen(spot_image, FilterSettings(strength=100, radius=1, threshold=50))
    assert out[2, 2, 0] == 255
    assert out[1, 1, 0] == 100
    assert out[3, 2, 0] == 100


def test_threshold_is_strict():
    original = rgba(1, 1, (10, 20, 30, 255))
    blurred = rgba(1, 1, (7, 16, 30, 255))  # delta (3, 4, 0), magnitude 5
    same = unsharp_mask(original, blurred, FilterSettings(strength=100, threshold=5))
    assert np.array_equal(same, original)
    changed = unsharp_mask(original, blurred, FilterSettings(strength=100, threshold=4.99))
    assert tuple(changed[0, 0]) == (13, 24, 30, 255)


def test_channels_saturate_instead_of_wrapping():
    original = rgba(1, 2, (250, 5, 128, 255))
    blurred = rgba(1, 2, (100, 200, 128, 255))
    out = unsharp_mask(original, blurred, FilterSettings(strength=100, threshold=0))
    assert tuple(out[0, 0]) == (255, 0, 128, 255)


def test_sharpen_clamps_bright_and_dark_centres():
    bright = rgba(3, 3, (0, 0, 0, 255))
    bright[1, 1, :3] = 200
    assert tuple(sharpen(bright, FilterSettings(strength=100, radius=1))[1, 1, :3]) == (255, 255, 255)

    dark = rgba(3, 3, (255, 255, 255, 255))
    dark[1, 1, :3] = 50
    assert tuple(sharpen(dark, FilterSettings(strength=100, radius=1))[1, 1, :3]) == (0, 0, 0)


def test_unsharp_mask_shape_mismatch(noisy_image):
    with pytest.raises(ValueError):
        unsharp_mask(noisy_image, noisy_image[:5].copy(), FilterSettings())


# ---------- properties ----------
@pytest.mark.parametrize("radius", [0, 1, 3])
def test_zero_strength_is_identity(noisy_image, radius):
    out = sharpen(noisy_image, FilterSettings(strength=0, radius=radius, threshold=0))
    assert np.array_equal(out, noisy_image)


@pytest.mark.parametrize("strength,threshold", [(100, 0), (45, 10)])
def test_zero_radius_is_identity(noisy_image, strength, threshold):
    out = sharpen(noisy_image, FilterSettings(strength=strength, radius=0, threshold=threshold))
    assert np.array_equal(out, noisy_image)


def test_border_of_radius_width_is_never_sharpened(noisy_image):
    r = 2
    h, w = noisy_image.shape[:2]
    out = sharpen(noisy_image, FilterSettings(strength=100, radius=r, threshold=0))
    ys, xs = np.mgrid[0:h, 0:w]
    border = (xs < r) | (xs >= w - r) | (ys < r) | (ys >= h - r)
    assert np.array_equal(out[border], noisy_image[border])
    assert not np.array_equal(out[~border], noisy_image[~border])


def test_geometry_and_alpha_preserved(noisy_image):
    out = sharpen(noisy_image, FilterSettings(strength=80, radius=2, threshold=3))
    assert out.shape == noisy_image.shape
    assert out.dtype == np.uint8
    assert np.array_equal(out[..., 3], noisy_image[..., 3])


def test_filter_is_not_idempotent(spot_image):
    settings = FilterSettings(strength=100, radius=1, threshold=0)
    once = sharpen(spot_image, settings)
    twice = sharpen(once, settings)
    assert not np.array_equal(once, twice)
    assert twice[1, 1, 0] == 64


def test_zero_strength_twice_is_still_identity(spot_image):
    settings = FilterSettings(strength=0, radius=1, threshold=0)
    assert np.array_equal(sharpen(sharpen(spot_image, settings), settings), spot_image)


@pytest.mark.parametrize("strength,threshold", [(100, 0), (1, 0), (50, 25)])
def test_solid_gray_is_unchanged(strength, threshold):
    gray = rgba(10, 10, (128, 128, 128, 255))
    out = sharpen(gray, FilterSettings(strength=strength, radius=2, threshold=threshold))
    assert np.array_equal(out, gray)


def test_sharpen_does_not_modify_input(spot_image):
    before = spot_image.copy()
    sharpen(spot_image, FilterSettings(strength=100, radius=1))
    assert np.array_equal(spot_image, before)


# ---------- tone ----------
def test_tone_standard_full_intensity():
    out = apply_tone(rgba(1, 1, (30, 60, 90, 200)), ToneSettings("standard", 100))
    assert tuple(out[0, 0]) == (60, 60, 60, 200)


def test_tone_blends_with_original():
    src = rgba(1, 1, (30, 60, 90, 255))
    assert tuple(apply_tone(src, ToneSettings("standard", 50))[0, 0]) == (45, 60, 75, 255)
    assert np.array_equal(apply_tone(src, ToneSettings("standard", 0)), src)


def test_tone_high_contrast():
    src = rgba(1, 3, (30, 60, 90, 255))
    src[0, 1, :3] = (200, 150, 160)
    src[0, 2, :3] = (128, 128, 128)
    out = apply_tone(src, ToneSettings("high-contrast", 100))
    assert tuple(out[0, 0, :3]) == (0, 0, 0)
    assert tuple(out[0, 1, :3]) == (255, 255, 255)
    assert tuple(out[0, 2, :3]) == (0, 0, 0)


def test_tone_sepia():
    src = rgba(1, 2, (30, 60, 90, 255))
    src[0, 1, :3] = (200, 200, 200)
    out = apply_tone(src, ToneSettings("sepia", 100))
    assert tuple(out[0, 0, :3]) == (81, 72, 56)
    assert tuple(out[0, 1, :3]) == (255, 241, 187)
