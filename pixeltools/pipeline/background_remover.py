# pipeline/background_remover.py
from pathlib import Path
from typing import Iterable, List
import logging

from ..models.pixel_buffer import PixelBuffer
from ..services.segmentation_service import SegmentationService

logger = logging.getLogger(__name__)


def remove_backgrounds(
    gallery: Iterable[PixelBuffer],
    *,
    segmentation_service: SegmentationService = SegmentationService(),
    algorithm: str = "hybrid",
    threshold: float = 50,
    softness: float = 0,
    cluster_threshold: float = 50,
) -> List[PixelBuffer]:
    """
    For every PixelBuffer in *gallery*:
        • run the chosen background heuristic
        • keep the source path, switched to .png (alpha must survive)
    Returns new PixelBuffer objects; the inputs are left untouched.
    """
    results = []
    for buffer in gallery:
        out = segmentation_service.remove_background(
            buffer,
            algorithm=algorithm,
            threshold=threshold,
            softness=softness,
            cluster_threshold=cluster_threshold,
        )
        if out.path is not None:
            out.path = Path(out.path).with_suffix(".png")
        logger.info(
            f"Removed background of {out.path or 'buffer'} "
            f"({segmentation_service.transparent_fraction(out):.0%} transparent)"
        )
        results.append(out)
    return results
