"""Loading ground-truth annotations from JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import GroundTruthError
from ..types import BoundingBox, GroundTruthShape, Point, ShapeType

GroundTruthDataset = Dict[str, List[GroundTruthShape]]


def load_ground_truth(path: Union[str, Path]) -> GroundTruthDataset:
    """Read a ``{"images": {name: {"shapes": [...]}}}`` annotation file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ground truth file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise GroundTruthError(f"Invalid ground truth JSON in {path}: {exc}") from exc
    return parse_ground_truth(data)


def parse_ground_truth(data: Mapping[str, Any]) -> GroundTruthDataset:
    images = data.get("images") if isinstance(data, Mapping) else None
    if not isinstance(images, Mapping):
        raise GroundTruthError("Ground truth must contain an 'images' mapping")

    dataset: GroundTruthDataset = {}
    for image_id, entry in images.items():
        shapes = entry.get("shapes", []) if isinstance(entry, Mapping) else entry
        if not isinstance(shapes, list):
            raise GroundTruthError(f"Shapes for image {image_id!r} must be a list")
        dataset[str(image_id)] = [parse_shape(record) for record in shapes]
    return dataset


def parse_shape(record: Mapping[str, Any]) -> GroundTruthShape:
    """Build a :class:`GroundTruthShape` from one annotation record."""

    if not isinstance(record, Mapping):
        raise GroundTruthError(f"Shape record must be an object, got {type(record).__name__}")
    try:
        shape_type = ShapeType(str(record.get("type", "")).lower())
    except ValueError as exc:
        raise GroundTruthError(f"Unknown shape type: {record.get('type')!r}") from exc

    vertices = record.get("vertices")
    return GroundTruthShape(
        type=shape_type,
        center=_point(record.get("center")),
        bounding_box=_box(record.get("bounding_box")),
        area=_number(record.get("area")),
        confidence_expected=_number(record.get("confidence_expected")),
        vertices=[_point(vertex) for vertex in vertices] if vertices else None,
        radius=_number(record.get("radius")),
    )


def _point(value: Any) -> Optional[Point]:
    if value is None:
        return None
    try:
        return Point(float(value["x"]), float(value["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GroundTruthError(f"Invalid point: {value!r}") from exc


def _box(value: Any) -> Optional[BoundingBox]:
    if value is None:
        return None
    try:
        return BoundingBox(
            float(value["x"]),
            float(value["y"]),
            float(value["width"]),
            float(value["height"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise GroundTruthError(f"Invalid bounding box: {value!r}") from exc


def _number(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise GroundTruthError(f"Expected a number, got {value!r}") from exc
