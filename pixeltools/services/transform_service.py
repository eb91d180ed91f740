from __future__ import annotations

from functools import lru_cache
from typing import Tuple, Union
import logging
import math
import os

import cv2
import numpy as np
from dotenv import load_dotenv
from PIL import Image as PILImage, ImageDraw, ImageFont

from ..models.color import RGBColor, as_color
from ..models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Bold sans-serif candidates, tried in order after WATERMARK_FONT_PATH
CANDIDATE_FONTS = [
    "DejaVuSans-Bold.ttf",
    "arialbd.ttf",
    "Arial Bold.ttf",
    "LiberationSans-Bold.ttf",
    "FreeSansBold.ttf",
    "Helvetica-Bold.ttf",
]

# preset -> (x %, y %) of the image size
WATERMARK_POSITIONS = {
    "top-left": (20, 30),
    "top-center": (50, 30),
    "top-right": (80, 30),
    "center-left": (20, 50),
    "center": (50, 50),
    "center-right": (80, 50),
    "bottom-left": (20, 70),
    "bottom-center": (50, 70),
    "bottom-right": (80, 70),
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@lru_cache(maxsize=32)
def _load_font(size: int):
    names = [os.getenv("WATERMARK_FONT_PATH")] + CANDIDATE_FONTS
    for name in names:
        if not name:
            continue
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.warning("No bold TrueType font found; falling back to Pillow's default font")
    return ImageFont.load_default(size=size)


class TransformService:
    """
    Geometry on PixelBuffers: crop, resize, rotate, flip, watermark.
    Each call returns a new buffer; degenerate sizes give an empty one.
    """

    # ─── Crop / resize ──────────────────────────────────────────────
    @staticmethod
    def crop(buffer: PixelBuffer, x: int, y: int, width: int, height: int) -> PixelBuffer:
        """
        Copy the width×height rectangle at (x, y).  Parts of the rectangle
        outside the source stay fully transparent.
        """
        x, y, width, height = int(x), int(y), int(width), int(height)
        if width <= 0 or height <= 0:
            return PixelBuffer.blank(0, 0)

        src_h, src_w = buffer.pixels.shape[:2]
        out = np.zeros((height, width, 4), dtype=np.uint8)

        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + width, src_w), min(y + height, src_h)
        if right > left and bottom > top:
            out[top - y:bottom - y, left - x:right - x] = buffer.pixels[top:bottom, left:right]
        return PixelBuffer(pixels=out, path=buffer.path)

    @staticmethod
    def resize(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            return PixelBuffer.blank(0, 0)
        if buffer.is_empty:
            return PixelBuffer.blank(width, height)

        shrinking = width * height < buffer.width * buffer.height
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
        out = cv2.resize(buffer.pixels, (width, height), interpolation=interpolation)
        return PixelBuffer(pixels=out, path=buffer.path)

    @staticmethod
    def scale_to_width(orig_width: int, orig_height: int, new_width: int) -> int:
        """Height that keeps the aspect ratio for *new_width*."""
        if orig_width <= 0:
            return 0
        return _round_half_up(new_width * orig_height / orig_width)

    @staticmethod
    def scale_to_height(orig_width: int, orig_height: int, new_height: int) -> int:
        """Width that keeps the aspect ratio for *new_height*."""
        if orig_height <= 0:
            return 0
        return _round_half_up(new_height * orig_width / orig_height)

    @staticmethod
    def constrain_aspect(width: int, height: int, ratio: str = "free") -> Tuple[int, int]:
        """
        Lock a crop rectangle to a "W:H" ratio by growing one side.
        """
        if ratio == "free":
            return width, height
        ratio_w, ratio_h = (float(part) for part in ratio.split(":"))
        target = ratio_w / ratio_h
        if height == 0 or width / height > target:
            return width, int(math.floor(width / target))
        return int(math.floor(height * target)), height

    # ─── Rotate / flip ──────────────────────────────────────────────
    @staticmethod
    def rotate(buffer: PixelBuffer, degrees: float) -> PixelBuffer:
        """
        Rotate clockwise about the center onto a canvas that just fits the
        rotated bounding box; uncovered corners are transparent.
        """
        if buffer.is_empty:
            return buffer.copy()

        if float(degrees) % 90 == 0:
            # lossless for right angles
            quarter_turns = int(round(float(degrees) / 90))
            out = np.ascontiguousarray(np.rot90(buffer.pixels, k=-quarter_turns % 4))
            return PixelBuffer(pixels=out, path=buffer.path)

        h, w = buffer.pixels.shape[:2]
        theta = math.radians(degrees)
        cos_t, sin_t = abs(math.cos(theta)), abs(math.sin(theta))
        new_w = int(round(w * cos_t + h * sin_t))
        new_h = int(round(w * sin_t + h * cos_t))
        if new_w <= 0 or new_h <= 0:
            return PixelBuffer.blank(0, 0)

        # OpenCV angles are counter-clockwise, hence -degrees
        matrix = cv2.getRotationMatrix2D(((w - 1) / 2.0, (h - 1) / 2.0), -float(degrees), 1.0)
        matrix[0, 2] += (new_w - w) / 2.0
        matrix[1, 2] += (new_h - h) / 2.0

        out = cv2.warpAffine(
            buffer.pixels, matrix, (new_w, new_h),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        return PixelBuffer(pixels=out, path=buffer.path)

    @staticmethod
    def flip(buffer: PixelBuffer, axis: str) -> PixelBuffer:
        """
        "horizontal" mirrors left↔right, "vertical" mirrors top↔bottom.
        """
        if axis == "horizontal":
            out = buffer.pixels[:, ::-1]
        elif axis == "vertical":
            out = buffer.pixels[::-1, :]
        else:
            raise ValueError(f"Unknown flip axis: {axis!r}")
        return PixelBuffer(pixels=np.ascontiguousarray(out), path=buffer.path)

    # ─── Watermark ──────────────────────────────────────────────────
    @staticmethod
    def watermark_position(width: int, height: int, preset: str = "center") -> Tuple[float, float]:
        if preset not in WATERMARK_POSITIONS:
            raise ValueError(f"Unknown watermark position: {preset!r}")
        pct_x, pct_y = WATERMARK_POSITIONS[preset]
        return pct_x / 100 * width, pct_y / 100 * height

    @staticmethod
    def watermark(
            buffer: PixelBuffer,
            text: str,
            x: float,
            y: float,
            font_size: int = 48,
            color: Union[RGBColor, str] = "#FFFFFF",
            opacity_percent: float = 70,
    ) -> PixelBuffer:
        """
        Draw *text* in bold sans-serif, anchored at its left baseline (x, y),
        and blend it over a copy of the buffer at *opacity_percent*.
        """
        rgb = as_color(color)
        alpha = _round_half_up(255 * min(max(opacity_percent, 0), 100) / 100)
        if not text or alpha == 0 or buffer.is_empty:
            return buffer.copy()

        base = PILImage.fromarray(np.ascontiguousarray(buffer.pixels))
        overlay = PILImage.new("RGBA", base.size, (rgb.r, rgb.g, rgb.b, 0))
        draw = ImageDraw.Draw(overlay)

        font = _load_font(max(1, int(font_size)))
        fill = (rgb.r, rgb.g, rgb.b, alpha)
        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text((x, y), text, font=font, fill=fill, anchor="ls")
        else:
            # bitmap fonts have no anchors; shift up to approximate the baseline
            draw.text((x, y - font_size), text, font=font, fill=fill)

        composited = PILImage.alpha_composite(base, overlay)
        return PixelBuffer(pixels=np.array(composited), path=buffer.path)
