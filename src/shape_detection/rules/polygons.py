"""Polygon rules driven by the estimated corner count."""

from __future__ import annotations

from ..types import ShapeFeatures, ShapeType
from .base import ShapeRule


class CornerCountRule(ShapeRule):
    """Labels regions whose corner estimate is at most ``max_corners``."""

    def __init__(self, shape: ShapeType, max_corners: int, fixed_confidence: float) -> None:
        super().__init__(shape)
        self.max_corners = max_corners
        self.fixed_confidence = fixed_confidence

    def matches(self, features: ShapeFeatures) -> bool:
        return features.corner_count <= self.max_corners

    def confidence(self, features: ShapeFeatures) -> float:
        return self._clip_confidence(self.fixed_confidence)


class TriangleRule(CornerCountRule):
    def __init__(self, max_corners: int = 4, confidence: float = 0.9) -> None:
        super().__init__(ShapeType.TRIANGLE, max_corners, confidence)


class PentagonRule(CornerCountRule):
    def __init__(self, max_corners: int = 6, confidence: float = 0.85) -> None:
        super().__init__(ShapeType.PENTAGON, max_corners, confidence)
