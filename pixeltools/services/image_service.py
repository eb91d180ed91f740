from __future__ import annotations
from pathlib import Path
from typing import Iterable, Union, Iterator
import os

import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()


class ImageService:
    """I/O helpers.  No pixel algorithms here."""
    def __init__(self):
        self.DEFAULT_QUALITY = int(os.getenv("DEFAULT_EXPORT_QUALITY", "90"))
        self.image_repository = ImageRepository()

    def create_buffer(self, pixels: np.ndarray, path: Union[str, Path] = None) -> PixelBuffer:
        return self.image_repository.create_buffer(pixels, path)

    def load(self, path: str | Path) -> PixelBuffer:
        """Load a single image from disk into a PixelBuffer."""
        return self.image_repository.load(path)

    def decode(self, data: bytes) -> PixelBuffer:
        return self.image_repository.decode(data)

    def encode(self, buffer: PixelBuffer, fmt: str = "png", quality: int | None = None) -> bytes:
        """
        Business-level encode; quality falls back to DEFAULT_EXPORT_QUALITY.
        """
        if quality is None:
            quality = self.DEFAULT_QUALITY
        return self.image_repository.encode(buffer, fmt=fmt, quality=quality)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelBuffer]:
        """
        Yield buffers lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def save(self, buffer: PixelBuffer, quality: int | None = None) -> None:
        """
        Business-level method to save the buffer to its path.
        """
        if quality is None:
            quality = self.DEFAULT_QUALITY
        self.image_repository.save(buffer, quality=quality)

    def save_gallery(self, gallery: Iterable[PixelBuffer], quality: int | None = None) -> None:
        for buffer in gallery:
            self.save(buffer, quality=quality)

    def relocate(self, buffer: PixelBuffer, folder: Union[str, Path], ext: str | None = None) -> PixelBuffer:
        """
        Same pixels, new destination path inside *folder* (keeps the stem).
        """
        stem = Path(buffer.path).stem if buffer.path else "image"
        suffix = ext or (Path(buffer.path).suffix if buffer.path else ".png")
        return PixelBuffer(pixels=buffer.pixels, path=Path(folder) / f"{stem}{suffix}")

