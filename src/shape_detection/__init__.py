"""Public exports for the shape detection package."""

from .detector import ShapeDetector
from .errors import GroundTruthError, InputError, ShapeDetectionError
from .evaluation import evaluate, load_ground_truth, run_evaluation, score_batch
from .types import (
    BoundingBox,
    DetectedShape,
    DetectionResult,
    EvaluationMetrics,
    GroundTruthShape,
    OverallResult,
    PixelBuffer,
    Point,
    ShapeType,
    TestResult,
)

__all__ = [
    "ShapeDetector",
    "BoundingBox",
    "DetectedShape",
    "DetectionResult",
    "EvaluationMetrics",
    "GroundTruthShape",
    "OverallResult",
    "PixelBuffer",
    "Point",
    "ShapeType",
    "TestResult",
    "GroundTruthError",
    "InputError",
    "ShapeDetectionError",
    "evaluate",
    "load_ground_truth",
    "run_evaluation",
    "score_batch",
]
