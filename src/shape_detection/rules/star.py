"""Rules for the many-cornered regions: stars and the rectangle fallback."""

from __future__ import annotations

from ..types import ShapeFeatures, ShapeType
from .base import ShapeRule


class StarRule(ShapeRule):
    """Near-square bounding box with a ragged outline reads as a star."""

    def __init__(
        self,
        max_width_ratio: float = 1.2,
        max_circularity: float = 0.4,
        confidence: float = 0.8,
    ) -> None:
        super().__init__(ShapeType.STAR)
        self.max_width_ratio = max_width_ratio
        self.max_circularity = max_circularity
        self.fixed_confidence = confidence

    def matches(self, features: ShapeFeatures) -> bool:
        box = features.bounding_box
        if box.height == 0:
            return False
        return box.width / box.height < self.max_width_ratio and features.circularity < self.max_circularity

    def confidence(self, features: ShapeFeatures) -> float:
        return self._clip_confidence(self.fixed_confidence)


class RectangleRule(ShapeRule):
    """Catch-all for regions no earlier rule claimed."""

    def __init__(self, confidence: float = 0.8) -> None:
        super().__init__(ShapeType.RECTANGLE)
        self.fixed_confidence = confidence

    def matches(self, features: ShapeFeatures) -> bool:
        return True

    def confidence(self, features: ShapeFeatures) -> float:
        return self._clip_confidence(self.fixed_confidence)
