import numpy as np
import pytest

from pixeltools.models.filter_settings import FILTER_PRESETS, FilterSettings
from pixeltools.models.pixel_buffer import PixelBuffer
from pixeltools.services.filter_service import FilterService


def _random_buffer(h=8, w=9, seed=3):
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8))


def test_default_settings_are_identity():
    buf = _random_buffer()
    out = FilterService().apply_filters(buf, FilterSettings())
    assert np.array_equal(out.pixels, buf.pixels)
    assert out.pixels is not buf.pixels


def test_grayscale_full_equalizes_channels():
    buf = _random_buffer()
    out = FilterService().apply_filters(buf, FilterSettings(grayscale=100))
    rgb = out.pixels[..., :3]
    assert (rgb[..., 0] == rgb[..., 1]).all() and (rgb[..., 1] == rgb[..., 2]).all()
    assert np.array_equal(out.pixels[..., 3], buf.pixels[..., 3])


def test_brightness_halves_values():
    buf = PixelBuffer(np.full((2, 2, 4), 200, dtype=np.uint8))
    out = FilterService().apply_filters(buf, FilterSettings(brightness=50))
    assert (out.pixels[..., :3] == 100).all()
    assert (out.pixels[..., 3] == 200).all()


def test_zero_contrast_goes_mid_gray():
    buf = _random_buffer()
    out = FilterService().apply_filters(buf, FilterSettings(contrast=0))
    assert (out.pixels[..., :3] == 128).all()


def test_blur_keeps_uniform_image():
    buf = PixelBuffer(np.full((10, 10, 4), 77, dtype=np.uint8))
    out = FilterService().apply_filters(buf, FilterSettings(blur=3))
    assert (out.pixels == 77).all()


def test_settings_clamp_css_and_dict_round_trip():
    settings = FilterSettings(brightness=500, blur=-2, sepia=150)
    assert settings.clamped() == FilterSettings(brightness=200, blur=0, sepia=100)
    assert FilterSettings().to_css() == (
        "brightness(100%) contrast(100%) saturate(100%) blur(0px) grayscale(0%) sepia(0%)"
    )
    stored = {**FilterSettings(contrast=140).to_dict(), "emoji": "x"}
    assert FilterSettings.from_dict(stored) == FilterSettings(contrast=140)
    assert FilterSettings.from_dict({"sepia": 40}) == FilterSettings(sepia=40)


def test_presets_lookup():
    svc = FilterService()
    assert len(FILTER_PRESETS) == 9
    assert svc.get_preset("noir").settings == FilterSettings(brightness=85, contrast=140, grayscale=100)
    assert svc.list_presets()[0] == "Original"
    with pytest.raises(KeyError):
        svc.get_preset("Polaroid")


def test_apply_preset_original_is_identity():
    buf = _random_buffer()
    assert np.array_equal(FilterService().apply_preset(buf, "Original").pixels, buf.pixels)
