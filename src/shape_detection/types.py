"""Common types used throughout the detection and scoring pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import cv2
import numpy as np

from .errors import InputError


class ShapeType(str, Enum):
    """Geometric primitives the classifier can report."""

    CIRCLE = "circle"
    TRIANGLE = "triangle"
    RECTANGLE = "rectangle"
    PENTAGON = "pentagon"
    STAR = "star"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def iou(self, other: BoundingBox) -> float:
        """Intersection over union of the two boxes, 0.0 when they do not overlap."""

        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x + self.width, other.x + other.width)
        y2 = min(self.y + self.height, other.y + other.height)
        if x2 <= x1 or y2 <= y1:
            return 0.0

        intersection = (x2 - x1) * (y2 - y1)
        union = self.area + other.area - intersection
        if union <= 0:
            return 0.0
        return float(intersection / union)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A decoded raster, either single-channel or three-channel BGR.

    The wrapped array is copied and made read-only so a buffer cannot change
    while a detection pass reads it.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim == 3 and pixels.shape[2] == 1:
            pixels = pixels[:, :, 0]
        if pixels.ndim not in (2, 3) or (pixels.ndim == 3 and pixels.shape[2] != 3):
            raise InputError(f"Unsupported pixel array shape: {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InputError(f"Unsupported pixel dtype: {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InputError(f"Pixel buffer has no pixels: {pixels.shape[1]}x{pixels.shape[0]}")

        frozen = np.array(pixels, copy=True)
        frozen.setflags(write=False)
        object.__setattr__(self, "pixels", frozen)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_samples(
        cls, width: int, height: int, samples: Sequence[int], channels: int = 4
    ) -> PixelBuffer:
        """Build a buffer from row-major RGBA, RGB or gray byte samples."""

        if width <= 0 or height <= 0:
            raise InputError(f"Pixel buffer has no pixels: {width}x{height}")
        if channels not in (1, 3, 4):
            raise InputError(f"Unsupported channel count: {channels}")

        raw = np.asarray(samples, dtype=np.uint8).ravel()
        expected = width * height * channels
        if raw.size != expected:
            raise InputError(f"Expected {expected} samples for {width}x{height}x{channels}, got {raw.size}")

        if channels == 1:
            return cls(raw.reshape(height, width))
        image = raw.reshape(height, width, channels)
        code = cv2.COLOR_RGBA2BGR if channels == 4 else cv2.COLOR_RGB2BGR
        return cls(cv2.cvtColor(np.ascontiguousarray(image), code))


@dataclass(frozen=True, eq=False)
class BinaryMask:
    """Foreground flags for one image plus the polarity that produced them."""

    mask: np.ndarray
    shapes_are_light: bool

    @property
    def width(self) -> int:
        return int(self.mask.shape[1])

    @property
    def height(self) -> int:
        return int(self.mask.shape[0])


@dataclass(frozen=True, eq=False)
class Region:
    """One connected component as flat pixel indices in visit order."""

    indices: np.ndarray
    image_width: int

    def __len__(self) -> int:
        return int(self.indices.size)

    @property
    def xs(self) -> np.ndarray:
        return self.indices % self.image_width

    @property
    def ys(self) -> np.ndarray:
        return self.indices // self.image_width


@dataclass(frozen=True)
class ShapeFeatures:
    """Geometric descriptors computed for a single region."""

    area: int
    bounding_box: BoundingBox
    center: Point
    perimeter: int
    circularity: float
    corner_count: int
    fill_ratio: float
    aspect_ratio: float
    thinness: float


@dataclass(frozen=True)
class DetectedShape:
    """Represents a single classified shape."""

    type: ShapeType
    confidence: float
    bounding_box: BoundingBox
    center: Point
    area: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "confidence": self.confidence,
            "bounding_box": self.bounding_box.to_dict(),
            "center": self.center.to_dict(),
            "area": self.area,
        }


@dataclass(frozen=True)
class DetectionResult:
    """Every shape found in one image and how long it took."""

    shapes: List[DetectedShape]
    processing_time_ms: float
    image_width: int
    image_height: int

    @classmethod
    def empty(cls) -> DetectionResult:
        return cls(shapes=[], processing_time_ms=0.0, image_width=0, image_height=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shapes": [shape.to_dict() for shape in self.shapes],
            "processing_time_ms": self.processing_time_ms,
            "image_width": self.image_width,
            "image_height": self.image_height,
        }


@dataclass(frozen=True)
class GroundTruthShape:
    """An annotated shape supplied by the ground-truth dataset."""

    type: ShapeType
    center: Optional[Point] = None
    bounding_box: Optional[BoundingBox] = None
    area: Optional[float] = None
    confidence_expected: Optional[float] = None
    vertices: Optional[List[Point]] = None
    radius: Optional[float] = None

    def box(self) -> Optional[BoundingBox]:
        """Return the annotated box, deriving it from vertices or radius if needed."""

        if self.bounding_box is not None:
            return self.bounding_box
        if self.vertices:
            xs = [vertex.x for vertex in self.vertices]
            ys = [vertex.y for vertex in self.vertices]
            return BoundingBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
        if self.center is not None and self.radius is not None:
            return BoundingBox(
                self.center.x - self.radius,
                self.center.y - self.radius,
                2 * self.radius,
                2 * self.radius,
            )
        return None


@dataclass(frozen=True)
class Match:
    """A detection paired with the ground-truth shape it claimed, if any."""

    detected: DetectedShape
    ground_truth: Optional[GroundTruthShape] = None
    ground_truth_index: Optional[int] = None
    iou: float = 0.0

    @property
    def is_true_positive(self) -> bool:
        return self.ground_truth is not None


@dataclass(frozen=True)
class EvaluationMetrics:
    precision: float
    recall: float
    f1_score: float
    average_iou: float
    center_point_accuracy: float
    area_accuracy: float
    confidence_calibration: float
    processing_time_ms: float

    @classmethod
    def zero(cls) -> EvaluationMetrics:
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def to_dict(self) -> Dict[str, float]:
        return {
            "precision": self.precision,
            "recall": self.recall,
            "f1_score": self.f1_score,
            "average_iou": self.average_iou,
            "center_point_accuracy": self.center_point_accuracy,
            "area_accuracy": self.area_accuracy,
            "confidence_calibration": self.confidence_calibration,
            "processing_time_ms": self.processing_time_ms,
        }


@dataclass(frozen=True)
class TestResult:
    """Outcome of detecting and scoring one image."""

    __test__ = False  # keep pytest from collecting this class

    image_id: str
    detection: DetectionResult
    evaluation: EvaluationMetrics
    score: float
    passed: bool
    feedback: List[str] = field(default_factory=list)

    @classmethod
    def failure(cls, image_id: str, message: str) -> TestResult:
        return cls(
            image_id=image_id,
            detection=DetectionResult.empty(),
            evaluation=EvaluationMetrics.zero(),
            score=0.0,
            passed=False,
            feedback=[f"Error during testing: {message}"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image_id": self.image_id,
            "detection": self.detection.to_dict(),
            "evaluation": self.evaluation.to_dict(),
            "score": self.score,
            "passed": self.passed,
            "feedback": list(self.feedback),
        }


@dataclass(frozen=True)
class BatchSummary:
    average_precision: float
    average_recall: float
    average_f1: float
    average_iou: float
    total_processing_time_ms: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "average_precision": self.average_precision,
            "average_recall": self.average_recall,
            "average_f1": self.average_f1,
            "average_iou": self.average_iou,
            "total_processing_time_ms": self.total_processing_time_ms,
        }


@dataclass(frozen=True)
class OverallResult:
    """Scores folded over a batch of images."""

    total_score: int
    max_score: int
    percentage: float
    grade: str
    test_results: List[TestResult]
    summary: BatchSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "grade": self.grade,
            "test_results": [result.to_dict() for result in self.test_results],
            "summary": self.summary.to_dict(),
        }
