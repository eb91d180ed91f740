"""Pixel statistics used by the background heuristics.

* ``dominant_color``      – most frequent exact RGB triple (assumed background).
* ``local_contrast``      – neighborhood difference of a single pixel.
* ``local_contrast_map``  – the same score for every pixel, vectorized.

All helpers take a raw ``(H, W, 4)`` uint8 RGBA array; alpha is ignored.
"""
from __future__ import annotations

import numpy as np

from .color import RGBColor, WHITE

# 4-connected + diagonal neighbors, as (dy, dx)
_NEIGHBOR_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


def dominant_color(pixels: np.ndarray) -> RGBColor:
    """
    Most frequent exact (r, g, b) triple.

    Colors are counted in one pass over a packed 24-bit key.  Ties
    resolve to the lowest key, i.e. the lexicographically smallest
    (r, g, b).
    An empty buffer yields white.
    """
    rgb = pixels[..., :3].reshape(-1, 3).astype(np.uint32)
    if rgb.shape[0] == 0:
        return WHITE

    keys = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]
    # argmax returns the first maximum, i.e. the lowest key
    key = int(np.bincount(keys).argmax())
    return RGBColor((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)


def local_contrast(pixels: np.ndarray, x: int, y: int) -> float:
    """
    Mean absolute channel difference between (x, y) and its in-bounds
    neighbors: averaged over R, G, B first, then over the neighbors that
    exist (3 at a corner, 5 on an edge, 8 inside).  No wrapping or padding.
    """
    height, width = pixels.shape[:2]
    center = pixels[y, x, :3].astype(np.int32)

    total = 0.0
    count = 0
    for dy, dx in _NEIGHBOR_OFFSETS:
        ny, nx = y + dy, x + dx
        if 0 <= ny < height and 0 <= nx < width:
            neighbor = pixels[ny, nx, :3].astype(np.int32)
            total += float(np.abs(center - neighbor).sum()) / 3.0
            count += 1

    return total / count if count else 0.0


def local_contrast_map(pixels: np.ndarray) -> np.ndarray:
    """
    ``local_contrast`` for every pixel at once.

    Returns
    -------
    contrast : np.ndarray  (H, W)  float64
    """
    rgb = pixels[..., :3].astype(np.float64)
    height, width = rgb.shape[:2]
    total = np.zeros((height, width), dtype=np.float64)
    count = np.zeros((height, width), dtype=np.float64)

    for dy, dx in _NEIGHBOR_OFFSETS:
        # pixels whose (y+dy, x+dx) neighbor lies inside the image
        rows = slice(max(0, -dy), height - max(0, dy))
        cols = slice(max(0, -dx), width - max(0, dx))
        n_rows = slice(max(0, dy), height - max(0, -dy))
        n_cols = slice(max(0, dx), width - max(0, -dx))

        diff = np.abs(rgb[rows, cols] - rgb[n_rows, n_cols]).mean(axis=2)
        total[rows, cols] += diff
        count[rows, cols] += 1

    return np.divide(total, count, out=np.zeros_like(total), where=count > 0)


def color_distance_map(pixels: np.ndarray, color: RGBColor) -> np.ndarray:
    """Euclidean RGB distance of every pixel to *color*, shape (H, W)."""
    rgb = pixels[..., :3].astype(np.float64)
    target = np.array(color.as_tuple(), dtype=np.float64)
    return np.sqrt(((rgb - target) ** 2).sum(axis=2))
