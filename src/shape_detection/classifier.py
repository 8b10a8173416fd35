"""Noise rejection and rule-based shape classification."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .rules import ShapeRule, default_rules
from .types import DetectedShape, ShapeFeatures

logger = logging.getLogger(__name__)

NoiseGate = Tuple[str, Callable[[ShapeFeatures], bool]]


class NoiseFilter:
    """Rejects specks and line-like regions before classification."""

    def __init__(
        self,
        min_area: int = 300,
        min_fill_ratio: float = 0.2,
        max_aspect_ratio: float = 4.0,
        max_thinness: float = 0.5,
    ) -> None:
        self.min_area = min_area
        self.min_fill_ratio = min_fill_ratio
        self.max_aspect_ratio = max_aspect_ratio
        self.max_thinness = max_thinness
        self.gates: List[NoiseGate] = [
            ("too_small", lambda f: f.area < self.min_area),
            ("too_sparse", lambda f: f.fill_ratio < self.min_fill_ratio),
            ("too_elongated", lambda f: f.aspect_ratio > self.max_aspect_ratio),
            ("too_thin", lambda f: f.thinness > self.max_thinness),
        ]

    def rejection_reason(self, features: ShapeFeatures) -> Optional[str]:
        """Name of the first gate the features trip, or None if they pass."""

        for name, rejects in self.gates:
            if rejects(features):
                return name
        return None

    def accepts(self, features: ShapeFeatures) -> bool:
        return self.rejection_reason(features) is None


class ShapeClassifier:
    """Runs the noise filter, then the first matching rule of an ordered list."""

    def __init__(
        self,
        rules: Optional[Sequence[ShapeRule]] = None,
        noise_filter: Optional[NoiseFilter] = None,
    ) -> None:
        self.rules: List[ShapeRule] = list(rules or default_rules())
        self.noise_filter = noise_filter or NoiseFilter()

    def classify(self, features: ShapeFeatures) -> Optional[DetectedShape]:
        """Return the detected shape, or None when the region is rejected."""

        reason = self.noise_filter.rejection_reason(features)
        if reason is not None:
            logger.debug("Rejected region at %s: %s", features.bounding_box, reason)
            return None

        for rule in self.rules:
            if rule.matches(features):
                return DetectedShape(
                    type=rule.shape,
                    confidence=rule.confidence(features),
                    bounding_box=features.bounding_box,
                    center=features.center,
                    area=features.area,
                )

        logger.debug("No rule matched region at %s", features.bounding_box)
        return None
