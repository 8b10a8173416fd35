"""Base rule definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..types import ShapeFeatures, ShapeType


class ShapeRule(ABC):
    """Abstract base class for one branch of the classification decision list."""

    shape: ShapeType

    def __init__(self, shape: ShapeType) -> None:
        self.shape = shape

    @abstractmethod
    def matches(self, features: ShapeFeatures) -> bool:
        """Return True if the features satisfy this rule's guard."""

    @abstractmethod
    def confidence(self, features: ShapeFeatures) -> float:
        """Confidence reported when this rule labels a region."""

    def _clip_confidence(self, value: float) -> float:
        return float(max(0.0, min(1.0, value)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.shape.value})"
