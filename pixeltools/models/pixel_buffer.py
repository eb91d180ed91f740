from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class PixelBuffer:
    """
    Simple data object: RGBA pixels (+ optional source path for bookkeeping).
    Every tool returns a new PixelBuffer backed by a freshly allocated array.
    """
    pixels: np.ndarray # Shape (H, W, 4), dtype uint8, RGBA order, top-left origin.
    path: Path | None = None # Source (or destination) of the image.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.pixels.size == 0

    def copy(self) -> PixelBuffer:
        return PixelBuffer(pixels=self.pixels.copy(), path=self.path)

    @classmethod
    def blank(cls, width: int, height: int) -> PixelBuffer:
        """Fully transparent buffer; negative sizes collapse to zero."""
        return cls(np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8))
