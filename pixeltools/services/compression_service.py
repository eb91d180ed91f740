from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import math

from ..models.pixel_buffer import PixelBuffer
from .image_service import ImageService
from .transform_service import TransformService

logger = logging.getLogger(__name__)

_SIZE_UNITS = ["Bytes", "KB", "MB"]


@dataclass
class CompressionResult:
    """
    Encoded output of one compression run plus the numbers the tool shows.
    """
    data: bytes
    width: int
    height: int
    format: str
    quality: int
    original_size: int = 0

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def ratio(self) -> float:
        return compression_ratio(self.original_size, self.size)


def format_file_size(num_bytes: int) -> str:
    if num_bytes == 0:
        return "0 Bytes"
    i = 0
    while i < len(_SIZE_UNITS) - 1 and num_bytes >= 1024 ** (i + 1):
        i += 1
    value = f"{round(num_bytes / 1024 ** i * 100) / 100:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[i]}"


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """Percent saved; 0 when the original size is unknown."""
    if not original_size:
        return 0.0
    return (1 - compressed_size / original_size) * 100


class CompressionService:
    """
    Downscales to fit max dimensions, then re-encodes with a quality setting.
    """

    def __init__(self):
        self.image_service = ImageService()
        self.transform_service = TransformService()

    @staticmethod
    def fit_dimensions(
            width: int,
            height: int,
            max_width: Optional[int] = None,
            max_height: Optional[int] = None,
    ) -> Tuple[int, int]:
        """
        Two-step clamp: width first, then height on the already-updated
        size.  Never scales up.  This is not a joint min-scale fit; a tight
        height limit is only checked after the width step.  A very wide strip
        can round its height down to 0, e.g. (300, 1) at max_width 100 gives
        (100, 0); such a size compresses to an empty buffer that cannot be
        encoded.
        """
        if max_width and width > max_width:
            height = int(math.floor(height * max_width / width + 0.5))
            width = max_width

        if max_height and height > max_height:
            width = int(math.floor(width * max_height / height + 0.5))
            height = max_height

        return width, height

    def compress_image(
            self,
            buffer: PixelBuffer,
            max_width: Optional[int] = None,
            max_height: Optional[int] = None,
    ) -> PixelBuffer:
        width, height = self.fit_dimensions(buffer.width, buffer.height, max_width, max_height)
        if (width, height) == (buffer.width, buffer.height):
            return buffer.copy()
        logger.debug(f"compress_image {buffer.width}x{buffer.height} -> {width}x{height}")
        return self.transform_service.resize(buffer, width, height)

    def compress(
            self,
            buffer: PixelBuffer,
            quality: int = 80,
            max_width: Optional[int] = None,
            max_height: Optional[int] = None,
            fmt: str = "jpeg",
            original_size: Optional[int] = None,
    ) -> CompressionResult:
        scaled = self.compress_image(buffer, max_width, max_height)
        data = self.image_service.encode(scaled, fmt=fmt, quality=quality)
        result = CompressionResult(
            data=data,
            width=scaled.width,
            height=scaled.height,
            format=fmt.lower().lstrip("."),
            quality=quality,
            original_size=original_size or 0,
        )
        logger.info(
            f"Compressed to {result.width}x{result.height} {result.format} q={quality}: "
            f"{format_file_size(result.size)} ({result.ratio:.1f}% saved)"
        )
        return result
