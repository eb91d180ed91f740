import math

from pixeltools.models.color import RGBColor, color_distance, hex_to_rgb, rgb_to_hex


def test_hex_round_trip():
    for color in [RGBColor(0, 0, 0), RGBColor(255, 255, 255), RGBColor(1, 128, 254), RGBColor(10, 11, 12)]:
        assert hex_to_rgb(rgb_to_hex(color)) == color


def test_to_hex_is_uppercase_and_padded():
    assert rgb_to_hex(RGBColor(1, 171, 205)) == "#01ABCD"
    assert RGBColor(0, 0, 0).to_hex() == "#000000"


def test_from_hex_accepts_missing_hash_and_any_case():
    assert hex_to_rgb("ff8000") == RGBColor(255, 128, 0)
    assert RGBColor.from_hex("#Ff8000") == RGBColor(255, 128, 0)


def test_malformed_hex_falls_back_to_white():
    for bad in ["", "#FFF", "#GGGGGG", "12345", "#1234567", "blue"]:
        assert hex_to_rgb(bad) == RGBColor(255, 255, 255)


def test_distance_identity_and_symmetry():
    a, b = RGBColor(10, 20, 30), RGBColor(200, 100, 0)
    assert color_distance(a, a) == 0
    assert color_distance(a, b) == color_distance(b, a)
    assert a.distance_to(b) == color_distance(a, b)


def test_distance_black_white():
    assert math.isclose(color_distance(RGBColor(0, 0, 0), RGBColor(255, 255, 255)), 441.6729559300637)
