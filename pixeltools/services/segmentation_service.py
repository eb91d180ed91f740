# services/segmentation_service.py
import logging

from ..models.color import RGBColor, WHITE
from ..models.color_statistics import dominant_color, local_contrast
from ..models.pixel_buffer import PixelBuffer
from ..models.segmentation_engine import SegmentationEngine

logger = logging.getLogger(__name__)


class SegmentationService:
    """
    Background removal at the business-logic layer.

    Maps the tool's three user-facing dials (threshold, softness, cluster
    threshold) onto the engine strategies:
        color      → white target, threshold
        clustering → cluster_threshold, 5 iterations
        contrast   → threshold as contrast threshold
        hybrid     → threshold for both the color and contrast scores
    """

    CLUSTER_ITERATIONS = 5

    def __init__(self) -> None:
        self.engine = SegmentationEngine()

    def remove_background(
            self,
            buffer: PixelBuffer,
            algorithm: str = "hybrid",
            threshold: float = 50,
            softness: float = 0,
            cluster_threshold: float = 50,
            target: RGBColor = WHITE,
    ) -> PixelBuffer:
        logger.debug(
            f"remove_background algorithm={algorithm} threshold={threshold} "
            f"softness={softness} cluster_threshold={cluster_threshold} size={buffer.width}x{buffer.height}"
        )
        if algorithm == "color":
            return self.engine.color_based(buffer, target, threshold, softness)
        if algorithm == "clustering":
            return self.engine.clustering(buffer, cluster_threshold, self.CLUSTER_ITERATIONS, softness)
        if algorithm == "contrast":
            return self.engine.contrast(buffer, threshold, softness)
        if algorithm == "hybrid":
            return self.engine.hybrid(buffer, threshold, threshold, softness)
        raise ValueError(f"Unknown segmentation algorithm: {algorithm!r}")

    @staticmethod
    def estimate_background(buffer: PixelBuffer) -> RGBColor:
        return dominant_color(buffer.pixels)

    @staticmethod
    def edge_strength(buffer: PixelBuffer, x: int, y: int) -> float:
        return local_contrast(buffer.pixels, x, y)

    @staticmethod
    def transparent_fraction(buffer: PixelBuffer) -> float:
        """Share of fully transparent pixels, 0 for an empty buffer."""
        if buffer.is_empty:
            return 0.0
        return float((buffer.pixels[..., 3] == 0).mean())
