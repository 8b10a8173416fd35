"""Connected-component labeling over a binary mask."""

from __future__ import annotations

from typing import List

import numpy as np

from .types import BinaryMask, Region

# (dx, dy) in the order neighbors are pushed; the pop order of the stack
# depends on it, and corner sampling depends on the pop order.
NEIGHBOR_OFFSETS = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


class Segmenter:
    """Splits a mask into 8-connected foreground regions.

    Seeds are taken in row-major order and each component is expanded with a
    last-in-first-out stack, so the pixel order of every region is
    deterministic. Components smaller than ``min_region_size`` are dropped.
    """

    def __init__(self, min_region_size: int = 40) -> None:
        self.min_region_size = min_region_size

    def segment(self, mask: BinaryMask) -> List[Region]:
        width, height = mask.width, mask.height
        foreground = mask.mask.ravel().tolist()
        visited = bytearray(width * height)

        regions: List[Region] = []
        for seed in np.flatnonzero(mask.mask).tolist():
            if visited[seed]:
                continue
            pixels = _flood_fill(seed, foreground, visited, width, height)
            if len(pixels) < self.min_region_size:
                continue
            regions.append(Region(indices=np.array(pixels, dtype=np.int64), image_width=width))
        return regions


def _flood_fill(seed: int, foreground: List[bool], visited: bytearray, width: int, height: int) -> List[int]:
    stack = [seed]
    visited[seed] = 1
    pixels: List[int] = []

    while stack:
        index = stack.pop()
        pixels.append(index)
        y, x = divmod(index, width)
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            neighbor = ny * width + nx
            if foreground[neighbor] and not visited[neighbor]:
                visited[neighbor] = 1
                stack.append(neighbor)
    return pixels
