"""Geometric descriptors for segmented regions."""

from __future__ import annotations

import math

import numpy as np

from .segmenter import NEIGHBOR_OFFSETS
from .types import BinaryMask, BoundingBox, Region, ShapeFeatures

EPSILON = 1e-6
CORNER_SAMPLES = 20
MIN_CORNER_ANGLE = math.pi / 4
MAX_CORNER_ANGLE = 3 * math.pi / 4


def boundary_map(mask: np.ndarray) -> np.ndarray:
    """Flag foreground pixels with a background or out-of-image 8-neighbor."""

    height, width = mask.shape
    padded = np.pad(mask, 1, mode="constant", constant_values=False)
    interior = np.ones_like(mask, dtype=bool)
    for dx, dy in NEIGHBOR_OFFSETS:
        interior &= padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return mask & ~interior


def count_corners(boundary: np.ndarray) -> int:
    """Estimate polygon vertices from an ordered ``(n, 2)`` array of boundary points.

    Roughly ``CORNER_SAMPLES`` positions are sampled along the boundary. At each
    one the turn between the next two edges is measured, and turns between 45
    and 135 degrees count as corners.
    """

    n = len(boundary)
    if n == 0:
        return 0

    points = boundary.astype(np.float64)
    step = n // CORNER_SAMPLES + 1
    sampled = np.arange(0, n, step)
    p1 = points[sampled]
    p2 = points[(sampled + 1) % n]
    p3 = points[(sampled + 2) % n]

    v1 = p2 - p1
    v2 = p3 - p2
    dot = (v1 * v2).sum(axis=1)
    magnitude = np.hypot(v1[:, 0], v1[:, 1]) * np.hypot(v2[:, 0], v2[:, 1])
    angles = np.arccos(np.clip(dot / (magnitude + EPSILON), -1.0, 1.0))
    return int(np.count_nonzero((angles > MIN_CORNER_ANGLE) & (angles < MAX_CORNER_ANGLE)))


class FeatureExtractor:
    """Computes :class:`ShapeFeatures` for the regions of one mask."""

    def __init__(self, mask: BinaryMask) -> None:
        self._boundary = boundary_map(mask.mask).ravel()

    def extract(self, region: Region) -> ShapeFeatures:
        xs = region.xs
        ys = region.ys
        min_x, max_x = int(xs.min()), int(xs.max())
        min_y, max_y = int(ys.min()), int(ys.max())

        bounding_box = BoundingBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)
        area = len(region)

        on_boundary = self._boundary[region.indices]
        perimeter = int(np.count_nonzero(on_boundary))
        circularity = 4 * math.pi * area / (perimeter * perimeter + EPSILON)
        boundary_points = np.column_stack((xs[on_boundary], ys[on_boundary]))

        box_width, box_height = bounding_box.width, bounding_box.height
        return ShapeFeatures(
            area=area,
            bounding_box=bounding_box,
            center=bounding_box.center,
            perimeter=perimeter,
            circularity=circularity,
            corner_count=count_corners(boundary_points),
            fill_ratio=area / (bounding_box.area + EPSILON),
            aspect_ratio=max(box_width, box_height) / max(1, min(box_width, box_height)),
            thinness=perimeter / (area + 1),
        )
