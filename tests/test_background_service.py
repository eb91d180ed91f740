import numpy as np

from pixeltools.models.color import RGBColor
from pixeltools.models.pixel_buffer import PixelBuffer
from pixeltools.services.background_service import BackgroundService


def _white_with_black_center():
    img = np.full((3, 3, 4), 255, dtype=np.uint8)
    img[1, 1] = (0, 0, 0, 255)
    return PixelBuffer(img)


def test_replace_background_color_knocks_out_within_tolerance():
    buf = _white_with_black_center()
    out = BackgroundService.replace_background_color(buf, RGBColor(250, 250, 250), tolerance=30)
    alpha = out.pixels[..., 3]
    assert alpha[1, 1] == 255
    assert (alpha.sum() == 255)
    assert np.array_equal(out.pixels[..., :3], buf.pixels[..., :3])


def test_change_background_fills_with_replacement():
    buf = _white_with_black_center()
    out = BackgroundService().change_background(buf, RGBColor(255, 255, 255), 10, "#00FF00")
    border = np.ones((3, 3), dtype=bool)
    border[1, 1] = False
    assert (out.pixels[border] == (0, 255, 0, 255)).all()
    assert tuple(out.pixels[1, 1]) == (0, 0, 0, 255)
    # source unchanged
    assert (buf.pixels[0, 0] == 255).all()


def test_change_background_malformed_hex_uses_white():
    buf = _white_with_black_center()
    out = BackgroundService().change_background(buf, RGBColor(0, 0, 0), 10, "not-a-color")
    assert tuple(out.pixels[1, 1]) == (255, 255, 255, 255)


def test_fill_transparent_only_touches_fully_transparent():
    img = np.zeros((1, 2, 4), dtype=np.uint8)
    img[0, 1] = (10, 20, 30, 1)
    out = BackgroundService.fill_transparent(PixelBuffer(img), RGBColor(1, 2, 3))
    assert tuple(out.pixels[0, 0]) == (1, 2, 3, 255)
    assert tuple(out.pixels[0, 1]) == (10, 20, 30, 1)


def test_composite_on_color_blends_and_is_opaque():
    img = np.zeros((1, 2, 4), dtype=np.uint8)
    img[0, 0] = (0, 0, 0, 0)
    img[0, 1] = (200, 100, 0, 255)
    out = BackgroundService.composite_on_color(PixelBuffer(img), "#FFFFFF")
    assert tuple(out.pixels[0, 0]) == (255, 255, 255, 255)
    assert tuple(out.pixels[0, 1]) == (200, 100, 0, 255)
