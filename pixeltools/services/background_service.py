from typing import Union
import logging

import numpy as np

from ..models.color import RGBColor, as_color
from ..models.color_statistics import color_distance_map
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class BackgroundService:
    """
    Business-level helper for background color replacement.

    • Knocks out pixels within a tolerance of a picked color.
    • Fills the knocked-out pixels with a replacement color.
    • Returns **new** PixelBuffer objects; the input is never modified.
    """

    @staticmethod
    def replace_background_color(
            buffer: PixelBuffer,
            target: RGBColor,
            tolerance: float,
    ) -> PixelBuffer:
        """Hard knock-out: alpha 0 wherever distance(pixel, target) < tolerance."""
        out = buffer.pixels.copy()
        if buffer.is_empty:
            return PixelBuffer(pixels=out, path=buffer.path)

        mask = color_distance_map(buffer.pixels, target) < tolerance
        out[..., 3][mask] = 0
        return PixelBuffer(pixels=out, path=buffer.path)

    @staticmethod
    def fill_transparent(buffer: PixelBuffer, color: Union[RGBColor, str]) -> PixelBuffer:
        """Fully transparent pixels become *color*, fully opaque."""
        rgb = as_color(color)
        out = buffer.pixels.copy()
        mask = out[..., 3] == 0
        out[mask] = (rgb.r, rgb.g, rgb.b, 255)
        return PixelBuffer(pixels=out, path=buffer.path)

    def change_background(
            self,
            buffer: PixelBuffer,
            target: RGBColor,
            tolerance: float,
            replacement: Union[RGBColor, str],
    ) -> PixelBuffer:
        logger.debug(f"change_background target={target.to_hex()} tolerance={tolerance} replacement={replacement}")
        knocked_out = self.replace_background_color(buffer, target, tolerance)
        return self.fill_transparent(knocked_out, replacement)

    @staticmethod
    def composite_on_color(buffer: PixelBuffer, color: Union[RGBColor, str]) -> PixelBuffer:
        """
        Alpha-blend onto a solid color; the result is fully opaque.
        """
        rgb = as_color(color)
        alpha = buffer.pixels[..., 3:4].astype("float32") / 255.0
        bg = np.array(rgb.as_tuple(), dtype="float32")

        blended = buffer.pixels[..., :3].astype("float32") * alpha + bg * (1.0 - alpha)
        out = np.empty_like(buffer.pixels)
        out[..., :3] = np.clip(np.rint(blended), 0, 255).astype("uint8")
        out[..., 3] = 255
        return PixelBuffer(pixels=out, path=buffer.path)
