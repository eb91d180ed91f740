from __future__ import annotations
from dataclasses import dataclass
import math
import re

_HEX_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


@dataclass(frozen=True)
class RGBColor:
    """
    Value-object for an opaque color, channels in [0, 255].
    Used both as a sampled pixel and as a reference color for segmentation.
    """
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    def to_hex(self) -> str:
        return rgb_to_hex(self)

    @classmethod
    def from_hex(cls, value: str) -> RGBColor:
        return hex_to_rgb(value)

    def distance_to(self, other: RGBColor) -> float:
        return color_distance(self, other)


WHITE = RGBColor(255, 255, 255)


def color_distance(a: RGBColor, b: RGBColor) -> float:
    """Euclidean distance in RGB space, in [0, ~441.67]."""
    dr = a.r - b.r
    dg = a.g - b.g
    db = a.b - b.b
    return math.sqrt(dr * dr + dg * dg + db * db)


def rgb_to_hex(color: RGBColor) -> str:
    return "#{:02X}{:02X}{:02X}".format(int(color.r), int(color.g), int(color.b))


def hex_to_rgb(value: str) -> RGBColor:
    """
    Parse ``#RRGGBB`` (``#`` optional, any case).

    Malformed input yields white instead of raising.
    """
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        return WHITE
    return RGBColor(*(int(group, 16) for group in match.groups()))


def as_color(value: RGBColor | str) -> RGBColor:
    """Accept either an RGBColor or a hex string."""
    if isinstance(value, RGBColor):
        return value
    return hex_to_rgb(value)
