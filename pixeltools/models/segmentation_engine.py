# models/segmentation_engine.py
"""
Heuristic background segmentation.

• Four interchangeable strategies: flat color threshold, dominant-color
  clustering, local contrast, and a color/contrast hybrid.
• Each returns a *new* PixelBuffer: RGB untouched, alpha lowered where the
  pixel looks like background.  Opacity is never raised above the source.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from .color import RGBColor
from .color_statistics import color_distance_map, dominant_color, local_contrast_map
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

HYBRID_CUTOFF = 0.3          # combined score a pixel must exceed to fade
HYBRID_COLOR_WEIGHT = 0.5    # contrast gets the remaining 0.5


class SegmentationEngine:
    ALGORITHMS = ("color", "clustering", "contrast", "hybrid")

    # --------------------------------------------------
    @staticmethod
    def _gain(softness: float) -> float:
        return 1.0 + softness / 100.0

    @staticmethod
    def _apply_alpha(buffer: PixelBuffer, alpha: np.ndarray, mask: np.ndarray) -> PixelBuffer:
        """
        Write *alpha* (float, H×W) into the pixels selected by *mask*,
        never exceeding the source alpha.
        """
        out = buffer.pixels.copy()
        src_alpha = out[..., 3]
        computed = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
        out[..., 3] = np.where(mask, np.minimum(src_alpha, computed), src_alpha)
        return PixelBuffer(pixels=out, path=buffer.path)

    # --------------------------------------------------
    def color_based(
            self,
            buffer: PixelBuffer,
            target: RGBColor,
            threshold: float,
            softness: float = 0.0,
    ) -> PixelBuffer:
        """
        Fade pixels close to *target*.

        For ``d = distance(pixel, target) < threshold``:
            alpha = 255 − (1 − d/threshold) · 255 · (1 + softness/100)
        so exact matches vanish and the fade reaches full opacity at the
        threshold.  ``threshold <= 0`` matches nothing.
        """
        if buffer.is_empty or threshold <= 0:
            return buffer.copy()

        dist = color_distance_map(buffer.pixels, target)
        mask = dist < threshold
        alpha = 255.0 - (1.0 - dist / threshold) * 255.0 * self._gain(softness)
        return self._apply_alpha(buffer, alpha, mask)

    def clustering(
            self,
            buffer: PixelBuffer,
            cluster_threshold: float,
            iterations: int = 5,
            softness: float = 0.0,
    ) -> PixelBuffer:
        """
        Same fade as ``color_based`` against the dominant color.

        *iterations* is reserved for multi-pass refinement; one pass is run.
        """
        if buffer.is_empty or cluster_threshold <= 0:
            return buffer.copy()

        background = dominant_color(buffer.pixels)
        logger.debug(f"Clustering background={background.to_hex()} iterations={iterations} (single pass)")
        return self.color_based(buffer, background, cluster_threshold, softness)

    def contrast(
            self,
            buffer: PixelBuffer,
            contrast_threshold: float,
            softness: float = 0.0,
    ) -> PixelBuffer:
        """
        Fade locally flat regions, independent of their color.

        For ``c = local_contrast < contrast_threshold``:
            alpha = 255 − ((T − c)/T) · 255 · (1 + softness/100)
        """
        if buffer.is_empty or contrast_threshold <= 0:
            return buffer.copy()

        contrast = local_contrast_map(buffer.pixels)
        mask = contrast < contrast_threshold
        flatness = (contrast_threshold - contrast) / contrast_threshold
        alpha = 255.0 - flatness * 255.0 * self._gain(softness)
        return self._apply_alpha(buffer, alpha, mask)

    def hybrid(
            self,
            buffer: PixelBuffer,
            color_threshold: float,
            contrast_threshold: float,
            softness: float = 0.0,
    ) -> PixelBuffer:
        """
        Average a color score (vs. the dominant color) with a flatness score.

        combined > 0.3  →  alpha = 255 · (1 − combined) · (1 + softness/100)
        """
        if buffer.is_empty or color_threshold <= 0 or contrast_threshold <= 0:
            return buffer.copy()

        background = dominant_color(buffer.pixels)
        dist = color_distance_map(buffer.pixels, background)
        contrast = local_contrast_map(buffer.pixels)

        color_score = np.maximum(0.0, 1.0 - dist / color_threshold)
        contrast_score = np.maximum(0.0, 1.0 - contrast / contrast_threshold)
        combined = HYBRID_COLOR_WEIGHT * color_score + (1.0 - HYBRID_COLOR_WEIGHT) * contrast_score

        mask = combined > HYBRID_CUTOFF
        alpha = 255.0 * (1.0 - combined) * self._gain(softness)
        return self._apply_alpha(buffer, alpha, mask)

    # --------------------------------------------------
    def predict(self, buffer: PixelBuffer, algorithm: str, **params) -> PixelBuffer:
        """
        Dispatch by strategy name.

        Args
        ----
        algorithm : "color" | "clustering" | "contrast" | "hybrid"
        params    : keyword arguments of the chosen strategy
        """
        strategies: Dict[str, Callable[..., PixelBuffer]] = {
            "color": self.color_based,
            "clustering": self.clustering,
            "contrast": self.contrast,
            "hybrid": self.hybrid,
        }
        if algorithm not in strategies:
            raise ValueError(f"Unknown segmentation algorithm: {algorithm!r}")
        return strategies[algorithm](buffer, **params)
