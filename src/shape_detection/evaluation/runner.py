"""Batch evaluation: detect, match and score a set of images."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence

from ..detector import ShapeDetector
from ..image_utils import ImageInput
from ..types import DetectionResult, GroundTruthShape, OverallResult, TestResult
from .matching import DEFAULT_IOU_THRESHOLD
from .metrics import evaluate
from .scoring import score_batch, score_image

logger = logging.getLogger(__name__)


def build_test_result(
    image_id: str,
    detection: DetectionResult,
    ground_truth: Sequence[GroundTruthShape],
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> TestResult:
    """Evaluate and score an already computed detection."""

    metrics = evaluate(
        detection.shapes,
        ground_truth,
        image_id,
        processing_time_ms=detection.processing_time_ms,
        iou_threshold=iou_threshold,
    )
    image_score = score_image(metrics)
    return TestResult(
        image_id=image_id,
        detection=detection,
        evaluation=metrics,
        score=image_score.score,
        passed=image_score.passed,
        feedback=image_score.feedback,
    )


def run_evaluation(
    detector: ShapeDetector,
    images: Mapping[str, ImageInput],
    ground_truth: Mapping[str, Sequence[GroundTruthShape]],
    image_ids: Optional[Iterable[str]] = None,
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> OverallResult:
    """Run every (or every selected) image through detection and scoring.

    Any failure on one image, such as an unreadable file, an unsupported array
    or missing annotations, becomes a zero-score :class:`TestResult` and the
    batch carries on.
    """

    selected = list(image_ids) if image_ids is not None else list(images)
    results: List[TestResult] = []

    for image_id in selected:
        logger.info("Testing: %s", image_id)
        try:
            if image_id not in images:
                raise KeyError(f"no image named {image_id!r}")
            if image_id not in ground_truth:
                raise KeyError(f"no ground truth for image {image_id!r}")
            detection = detector.analyze(images[image_id])
            results.append(build_test_result(image_id, detection, ground_truth[image_id], iou_threshold))
        except Exception as exc:
            message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
            logger.warning("Error testing %s: %s", image_id, message)
            results.append(TestResult.failure(image_id, str(message)))

    return score_batch(results)
