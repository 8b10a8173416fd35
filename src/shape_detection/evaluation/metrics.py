"""Per-image precision, recall and localization metrics."""

from __future__ import annotations

from typing import Sequence

from ..types import DetectedShape, EvaluationMetrics, GroundTruthShape
from .matching import DEFAULT_IOU_THRESHOLD, match_shapes


def evaluate(
    detected: Sequence[DetectedShape],
    ground_truth: Sequence[GroundTruthShape],
    image_id: str = "",
    processing_time_ms: float = 0.0,
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> EvaluationMetrics:
    """Score one image's detections against its annotations.

    Precision is 0 when nothing was detected and recall is 1 when nothing was
    annotated. Localization metrics are averaged over true positives only;
    a matched pair whose annotation lacks a center, area or expected
    confidence contributes no error to that metric. ``image_id`` is accepted
    for symmetry with the batch runner and does not affect the result.
    """

    matches = match_shapes(detected, ground_truth, iou_threshold)
    true_positives = 0
    total_iou = 0.0
    total_center_distance = 0.0
    total_area_error = 0.0
    total_confidence_error = 0.0

    for match in matches:
        truth = match.ground_truth
        if truth is None:
            continue
        shape = match.detected
        true_positives += 1
        total_iou += match.iou

        if truth.center is not None:
            total_center_distance += shape.center.distance_to(truth.center)
        if truth.area and shape.area:
            total_area_error += abs(shape.area - truth.area) / truth.area
        if truth.confidence_expected and shape.confidence:
            total_confidence_error += abs(shape.confidence - truth.confidence_expected)

    precision = true_positives / len(detected) if detected else 0.0
    recall = true_positives / len(ground_truth) if ground_truth else 1.0
    if precision + recall > 0:
        f1_score = 2 * precision * recall / (precision + recall)
    else:
        f1_score = 0.0

    if true_positives == 0:
        return EvaluationMetrics(
            precision=precision,
            recall=recall,
            f1_score=f1_score,
            average_iou=0.0,
            center_point_accuracy=0.0,
            area_accuracy=0.0,
            confidence_calibration=0.0,
            processing_time_ms=processing_time_ms,
        )

    return EvaluationMetrics(
        precision=precision,
        recall=recall,
        f1_score=f1_score,
        average_iou=total_iou / true_positives,
        center_point_accuracy=total_center_distance / true_positives,
        area_accuracy=1 - total_area_error / true_positives,
        confidence_calibration=1 - total_confidence_error / true_positives,
        processing_time_ms=processing_time_ms,
    )
