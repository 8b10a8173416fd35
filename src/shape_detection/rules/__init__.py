"""Classification rule exports."""

from typing import Tuple

from .base import ShapeRule
from .circle import CircleRule
from .polygons import CornerCountRule, PentagonRule, TriangleRule
from .star import RectangleRule, StarRule


def default_rules() -> Tuple[ShapeRule, ...]:
    """The decision list in priority order; the first matching rule wins."""

    return (
        CircleRule(),
        TriangleRule(),
        PentagonRule(),
        StarRule(),
        RectangleRule(),
    )


__all__ = [
    "ShapeRule",
    "CircleRule",
    "CornerCountRule",
    "TriangleRule",
    "PentagonRule",
    "StarRule",
    "RectangleRule",
    "default_rules",
]
