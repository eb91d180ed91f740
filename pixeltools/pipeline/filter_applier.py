# pipeline/filter_applier.py
from typing import Iterable, List
import logging

from ..models.pixel_buffer import PixelBuffer
from ..services.filter_service import FilterService

logger = logging.getLogger(__name__)


def apply_filter_preset(
    gallery: Iterable[PixelBuffer],
    preset: str,
    *,
    filter_service: FilterService = FilterService(),
) -> List[PixelBuffer]:
    """
    Apply one named preset to every buffer.  Raises KeyError for an
    unknown preset before any image is touched.
    """
    settings = filter_service.get_preset(preset).settings
    logger.info(f"Applying preset {preset!r}: {settings.to_css()}")
    return [filter_service.apply_filters(buffer, settings) for buffer in gallery]
