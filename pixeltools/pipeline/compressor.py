# pipeline/compressor.py
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from ..models.pixel_buffer import PixelBuffer
from ..services.compression_service import CompressionResult, CompressionService

logger = logging.getLogger(__name__)


def compress_gallery(
    gallery: Iterable[PixelBuffer],
    *,
    compression_service: CompressionService = CompressionService(),
    quality: int = 80,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
    fmt: str = "jpeg",
) -> List[CompressionResult]:
    """
    Compress every buffer; the original file size (when the buffer came
    from disk) is recorded so each result carries its savings ratio.
    """
    results = []
    for buffer in gallery:
        original_size = None
        if buffer.path is not None and Path(buffer.path).is_file():
            original_size = Path(buffer.path).stat().st_size
        results.append(compression_service.compress(
            buffer,
            quality=quality,
            max_width=max_width,
            max_height=max_height,
            fmt=fmt,
            original_size=original_size,
        ))
    return results
