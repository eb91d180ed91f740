from __future__ import annotations

import logging

import cv2
import numpy as np

from ..models.filter_settings import FILTER_PRESETS, FilterPreset, FilterSettings
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def _saturate_matrix(s: float) -> np.ndarray:
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ])


def _grayscale_matrix(amount: float) -> np.ndarray:
    k = 1.0 - amount
    return np.array([
        [0.2126 + 0.7874 * k, 0.7152 - 0.7152 * k, 0.0722 - 0.0722 * k],
        [0.2126 - 0.2126 * k, 0.7152 + 0.2848 * k, 0.0722 - 0.0722 * k],
        [0.2126 - 0.2126 * k, 0.7152 - 0.7152 * k, 0.0722 + 0.9278 * k],
    ])


def _sepia_matrix(amount: float) -> np.ndarray:
    k = 1.0 - amount
    return np.array([
        [0.393 + 0.607 * k, 0.769 - 0.769 * k, 0.189 - 0.189 * k],
        [0.349 - 0.349 * k, 0.686 + 0.314 * k, 0.168 - 0.168 * k],
        [0.272 - 0.272 * k, 0.534 - 0.534 * k, 0.131 + 0.869 * k],
    ])


class FilterService:
    """
    Applies FilterSettings to pixels with CSS filter semantics
    (brightness → contrast → saturate → blur → grayscale → sepia).
    Dials at their identity value are skipped entirely.
    """

    @staticmethod
    def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        return np.clip(rgb @ matrix.T, 0.0, 1.0)

    def apply_filters(self, buffer: PixelBuffer, settings: FilterSettings) -> PixelBuffer:
        settings = settings.clamped()
        out = buffer.pixels.copy()
        if buffer.is_empty or settings.is_identity():
            return PixelBuffer(pixels=out, path=buffer.path)

        logger.debug(f"apply_filters {settings.to_css()}")
        rgb = out[..., :3].astype(np.float64) / 255.0

        if settings.brightness != 100:
            rgb = np.clip(rgb * (settings.brightness / 100.0), 0.0, 1.0)
        if settings.contrast != 100:
            rgb = np.clip((rgb - 0.5) * (settings.contrast / 100.0) + 0.5, 0.0, 1.0)
        if settings.saturation != 100:
            rgb = self._apply_matrix(rgb, _saturate_matrix(settings.saturation / 100.0))

        out[..., :3] = np.rint(rgb * 255.0).astype(np.uint8)

        if settings.blur > 0:
            # sigma in px, like CSS blur(); blurs alpha too
            out = cv2.GaussianBlur(out, (0, 0), sigmaX=settings.blur, sigmaY=settings.blur)

        if settings.grayscale > 0 or settings.sepia > 0:
            rgb = out[..., :3].astype(np.float64) / 255.0
            if settings.grayscale > 0:
                rgb = self._apply_matrix(rgb, _grayscale_matrix(settings.grayscale / 100.0))
            if settings.sepia > 0:
                rgb = self._apply_matrix(rgb, _sepia_matrix(settings.sepia / 100.0))
            out[..., :3] = np.rint(rgb * 255.0).astype(np.uint8)

        return PixelBuffer(pixels=out, path=buffer.path)

    def apply_preset(self, buffer: PixelBuffer, name: str) -> PixelBuffer:
        return self.apply_filters(buffer, self.get_preset(name).settings)

    @staticmethod
    def get_preset(name: str) -> FilterPreset:
        for preset in FILTER_PRESETS:
            if preset.name.lower() == name.strip().lower():
                return preset
        raise KeyError(f"Unknown filter preset: {name!r}")

    @staticmethod
    def list_presets() -> list[str]:
        return [preset.name for preset in FILTER_PRESETS]
