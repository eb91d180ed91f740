from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator
from io import BytesIO
import logging
import os

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# normalized format name -> Pillow format
_PIL_FORMATS = {"png": "PNG", "jpeg": "JPEG", "jpg": "JPEG", "webp": "WEBP"}


class ImageRepository:
    """
    Handles decoding, encoding and file I/O for PixelBuffer entities.
    Everything in and out of here is RGBA uint8.
    """
    def __init__(self):
        raw = os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.webp,.bmp")
        self.VALID_EXTS = {ext.strip().lower() for ext in raw.split(",") if ext.strip()}

    @staticmethod
    def create_buffer(pixels: np.ndarray, path: Union[str, Path] = None) -> PixelBuffer:
        if path is None:
            return PixelBuffer(pixels)
        return PixelBuffer(pixels=pixels, path=Path(path))

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        """OpenCV gives GRAY, BGR or BGRA depending on the file."""
        if arr.dtype != np.uint8:
            # 16-bit PNG/TIFF → 8 bit
            arr = (arr / 257).astype(np.uint8) if arr.dtype == np.uint16 else arr.astype(np.uint8)
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.shape[2] == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)

    @classmethod
    def load(cls, path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return PixelBuffer(pixels=cls._to_rgba(arr), path=path)

    @classmethod
    def decode(cls, data: bytes) -> PixelBuffer:
        arr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ValueError("Could not decode image bytes")
        return PixelBuffer(pixels=cls._to_rgba(arr))

    @staticmethod
    def normalize_format(fmt: str) -> str:
        key = fmt.lower().lstrip(".")
        if key not in _PIL_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt!r}")
        return _PIL_FORMATS[key]

    @classmethod
    def encode(cls, buffer: PixelBuffer, fmt: str = "png", quality: int = 90) -> bytes:
        """
        Encode to PNG / JPEG / WebP bytes.

        quality is a percentage (0–100); PNG ignores it.
        JPEG has no alpha channel, so transparency is dropped.
        """
        pil_format = cls.normalize_format(fmt)
        quality = int(min(max(quality, 0), 100))

        pil_obj = PILImage.fromarray(np.ascontiguousarray(buffer.pixels))
        if pil_format == "JPEG":
            pil_obj = pil_obj.convert("RGB")

        out = BytesIO()
        try:
            if pil_format == "PNG":
                pil_obj.save(out, format=pil_format)
            else:
                pil_obj.save(out, format=pil_format, quality=quality)
        except (OSError, ValueError) as err:
            raise OSError(f"Failed to encode image as {pil_format}: {err}") from err
        return out.getvalue()

    @classmethod
    def save(cls, buffer: PixelBuffer, quality: int = 90) -> None:
        if buffer.path is None:
            raise ValueError("PixelBuffer has no path to save to")
        path = Path(buffer.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(cls.encode(buffer, fmt=path.suffix or "png", quality=quality))

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelBuffer]:
        """
        Yield PixelBuffer objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield self.load(p)
            except FileNotFoundError as err:
                logger.warning(f"Skipping {p.name}: {err}")

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[PixelBuffer]:
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
