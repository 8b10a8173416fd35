"""Circle rule based on the isoperimetric ratio."""

from __future__ import annotations

from ..types import ShapeFeatures, ShapeType
from .base import ShapeRule


class CircleRule(ShapeRule):
    """Labels compact regions as circles; confidence is the circularity itself."""

    def __init__(self, min_circularity: float = 0.75) -> None:
        super().__init__(ShapeType.CIRCLE)
        self.min_circularity = min_circularity

    def matches(self, features: ShapeFeatures) -> bool:
        return features.circularity > self.min_circularity

    def confidence(self, features: ShapeFeatures) -> float:
        return self._clip_confidence(features.circularity)
