import numpy as np
import pytest

from pixeltools.models.color import RGBColor
from pixeltools.models.pixel_buffer import PixelBuffer
from pixeltools.pipeline.background_remover import remove_backgrounds
from pixeltools.services.segmentation_service import SegmentationService


def _product_shot(path=None):
    img = np.full((8, 8, 4), 255, dtype=np.uint8)
    img[3:5, 3:5] = (200, 0, 0, 255)
    return PixelBuffer(img, path=path)


@pytest.mark.parametrize("algorithm", ["color", "clustering", "contrast", "hybrid"])
def test_every_algorithm_clears_corner_and_keeps_object(algorithm):
    svc = SegmentationService()
    out = svc.remove_background(_product_shot(), algorithm=algorithm, threshold=50, cluster_threshold=50)
    assert out.pixels[0, 0, 3] == 0
    assert out.pixels[3, 3, 3] == 255
    assert svc.transparent_fraction(out) > 0.5


def test_unknown_algorithm_raises():
    with pytest.raises(ValueError):
        SegmentationService().remove_background(_product_shot(), algorithm="neural")


def test_background_estimate_and_edge_strength():
    svc = SegmentationService()
    assert svc.estimate_background(_product_shot()) == RGBColor(255, 255, 255)
    assert svc.edge_strength(_product_shot(), 0, 0) == 0.0
    assert svc.edge_strength(_product_shot(), 3, 3) > 0


def test_remove_backgrounds_pipeline_switches_to_png(tmp_path):
    source = _product_shot(path=tmp_path / "shot.jpg")
    [out] = remove_backgrounds([source], algorithm="clustering", cluster_threshold=30)
    assert out.path.name == "shot.png"
    assert out.pixels[0, 0, 3] == 0
    assert (source.pixels[..., 3] == 255).all()
    assert source.path.name == "shot.jpg"
