"""Tests for matching, per-image metrics and batch scoring."""

from __future__ import annotations

import pytest

from shape_detection.evaluation import (
    evaluate,
    grade_for,
    match_shapes,
    score_batch,
    score_image,
    unmatched_ground_truth,
)
from shape_detection.evaluation.scoring import CENTER_BANDS, F1_BANDS, TIME_BANDS, band_points
from shape_detection.types import (
    BoundingBox,
    DetectedShape,
    DetectionResult,
    EvaluationMetrics,
    GroundTruthShape,
    Point,
    ShapeType,
    TestResult,
)


def _detected(box, shape_type=ShapeType.CIRCLE, confidence=0.9, area=None) -> DetectedShape:
    box = BoundingBox(*box)
    return DetectedShape(
        type=shape_type,
        confidence=confidence,
        bounding_box=box,
        center=box.center,
        area=area if area is not None else int(box.area),
    )


def _truth(box, shape_type=ShapeType.CIRCLE, **kwargs) -> GroundTruthShape:
    return GroundTruthShape(type=shape_type, bounding_box=BoundingBox(*box), **kwargs)


def _metrics(**overrides) -> EvaluationMetrics:
    values = EvaluationMetrics.zero().to_dict()
    values.update(overrides)
    return EvaluationMetrics(**values)


def _test_result(score: float, **metric_overrides) -> TestResult:
    return TestResult(
        image_id="img",
        detection=DetectionResult.empty(),
        evaluation=_metrics(**metric_overrides),
        score=score,
        passed=score >= 60,
    )


def test_iou_of_boxes():
    box = BoundingBox(0, 0, 10, 10)
    assert box.iou(box) == 1.0
    assert box.iou(BoundingBox(20, 20, 5, 5)) == 0.0
    assert box.iou(BoundingBox(10, 0, 10, 10)) == 0.0
    assert box.iou(BoundingBox(5, 0, 10, 10)) == pytest.approx(1 / 3)


def test_matcher_picks_highest_iou_candidate():
    detections = [_detected((0, 0, 10, 10))]
    truths = [_truth((2, 0, 10, 10)), _truth((1, 0, 10, 10))]
    match = match_shapes(detections, truths)[0]

    assert match.ground_truth_index == 1
    assert match.iou == pytest.approx(90 / 110)


def test_matcher_gives_earlier_detections_first_pick():
    detections = [_detected((0, 0, 10, 10)), _detected((0, 0, 10, 10))]
    truths = [_truth((0, 0, 10, 10))]
    matches = match_shapes(detections, truths)

    assert matches[0].is_true_positive
    assert not matches[1].is_true_positive
    assert unmatched_ground_truth(matches, truths) == []


def test_matcher_never_reuses_ground_truth():
    detections = [_detected((x, 0, 10, 10)) for x in (0, 1, 2, 3, 0, 1)]
    truths = [_truth((0, 0, 10, 10)), _truth((2, 0, 10, 10)), _truth((50, 50, 10, 10))]
    matches = match_shapes(detections, truths)

    claimed = [m.ground_truth_index for m in matches if m.is_true_positive]
    assert len(claimed) == len(set(claimed)) == 2
    assert unmatched_ground_truth(matches, truths) == [truths[2]]


def test_matcher_requires_same_type():
    matches = match_shapes([_detected((0, 0, 10, 10))], [_truth((0, 0, 10, 10), ShapeType.TRIANGLE)])
    assert not matches[0].is_true_positive


def test_matcher_threshold_is_strict():
    detections = [_detected((0, 0, 10, 10))]
    truths = [_truth((0, 0, 10, 5))]
    assert not match_shapes(detections, truths, iou_threshold=0.5)[0].is_true_positive
    assert match_shapes(detections, truths, iou_threshold=0.4)[0].is_true_positive


def test_raising_threshold_never_adds_true_positives():
    detections = [_detected((x, y, 20, 20)) for x, y in [(0, 0), (3, 1), (30, 30), (62, 60), (90, 95)]]
    truths = [_truth((x, y, 20, 20)) for x, y in [(1, 0), (5, 4), (34, 30), (60, 60), (100, 100)]]

    counts = [
        sum(m.is_true_positive for m in match_shapes(detections, truths, threshold))
        for threshold in (0.0, 0.2, 0.4, 0.5, 0.6, 0.8, 0.95)
    ]
    assert counts == sorted(counts, reverse=True)
    assert counts[0] > counts[-1]


def test_ground_truth_box_derived_from_radius_or_vertices():
    by_radius = GroundTruthShape(type=ShapeType.CIRCLE, center=Point(10, 10), radius=5)
    by_vertices = GroundTruthShape(
        type=ShapeType.TRIANGLE, vertices=[Point(0, 10), Point(5, 0), Point(10, 10)]
    )
    assert by_radius.box() == BoundingBox(5, 5, 10, 10)
    assert by_vertices.box() == BoundingBox(0, 0, 10, 10)
    assert GroundTruthShape(type=ShapeType.STAR, center=Point(1, 1)).box() is None


def test_no_detections_against_ground_truth():
    metrics = evaluate([], [_truth((0, 0, 10, 10))], "empty")
    assert (metrics.precision, metrics.recall, metrics.f1_score) == (0.0, 0.0, 0.0)
    assert metrics.average_iou == 0.0


def test_empty_ground_truth_counts_as_full_recall():
    metrics = evaluate([_detected((0, 0, 10, 10))], [], "negative")
    assert metrics.precision == 0.0
    assert metrics.recall == 1.0
    assert metrics.f1_score == 0.0


def test_identical_detection_scores_perfectly():
    detection = _detected((10, 10, 20, 20), confidence=0.9, area=300)
    truth = _truth((10, 10, 20, 20), center=Point(20, 20), area=300, confidence_expected=0.9)
    metrics = evaluate([detection], [truth], "perfect")

    assert metrics.precision == metrics.recall == metrics.f1_score == 1.0
    assert metrics.average_iou == 1.0
    assert metrics.center_point_accuracy == 0.0
    assert metrics.area_accuracy == 1.0
    assert metrics.confidence_calibration == 1.0

    image_score = score_image(metrics)
    assert image_score.score == 100
    assert image_score.passed

    overall = score_batch([TestResult("perfect", DetectionResult.empty(), metrics, image_score.score, True)])
    assert overall.grade == "A"
    assert overall.percentage == 100.0


def test_localization_errors_are_averaged_over_matches():
    detection = _detected((10, 10, 20, 20), confidence=0.8, area=90)
    truth = _truth((10, 10, 20, 20), center=Point(23, 24), area=100, confidence_expected=0.9)
    metrics = evaluate([detection], [truth], "offset", processing_time_ms=12.5)

    assert metrics.center_point_accuracy == pytest.approx(5.0)
    assert metrics.area_accuracy == pytest.approx(0.9)
    assert metrics.confidence_calibration == pytest.approx(0.9)
    assert metrics.processing_time_ms == 12.5


def test_missing_annotation_fields_contribute_no_error():
    metrics = evaluate([_detected((0, 0, 10, 10), area=55)], [_truth((0, 0, 10, 10))], "sparse")
    assert metrics.center_point_accuracy == 0.0
    assert metrics.area_accuracy == 1.0
    assert metrics.confidence_calibration == 1.0


@pytest.mark.parametrize(
    ("value", "bands", "higher_is_better", "points"),
    [
        (0.9, F1_BANDS, True, 40),
        (0.89, F1_BANDS, True, 30),
        (0.5, F1_BANDS, True, 20),
        (0.49, F1_BANDS, True, 0),
        (5.0, CENTER_BANDS, False, 15),
        (5.1, CENTER_BANDS, False, 12),
        (20.0, CENTER_BANDS, False, 8),
        (20.1, CENTER_BANDS, False, 0),
        (500.0, TIME_BANDS, False, 10),
        (2000.0, TIME_BANDS, False, 5),
        (2000.1, TIME_BANDS, False, 0),
    ],
)
def test_band_points(value, bands, higher_is_better, points):
    assert band_points(value, bands, higher_is_better) == points


def test_score_image_weights_and_feedback():
    metrics = _metrics(
        f1_score=0.75,
        average_iou=0.65,
        center_point_accuracy=8.0,
        area_accuracy=0.75,
        processing_time_ms=1500.0,
    )
    image_score = score_image(metrics)

    assert image_score.score == 30 + 20 + 12 + 5 + 5
    assert image_score.passed
    assert len(image_score.feedback) == 5
    assert "Good localization" in image_score.feedback[1]


def test_score_below_sixty_fails():
    assert not score_image(_metrics(f1_score=0.5, center_point_accuracy=50.0, processing_time_ms=5000.0)).passed


@pytest.mark.parametrize(
    ("percentage", "grade"),
    [(100, "A"), (90, "A"), (89.99, "B"), (80, "B"), (70, "C"), (60, "D"), (59.9, "F"), (0, "F")],
)
def test_grade_for(percentage, grade):
    assert grade_for(percentage) == grade


def test_score_batch_averages_and_grades():
    results = [
        _test_result(100, precision=1.0, recall=1.0, f1_score=1.0, average_iou=0.9, processing_time_ms=10.0),
        _test_result(50, precision=0.5, recall=0.0, f1_score=0.0, average_iou=0.0, processing_time_ms=30.0),
    ]
    overall = score_batch(results)

    assert overall.total_score == 150
    assert overall.max_score == 200
    assert overall.percentage == 75.0
    assert overall.grade == "C"
    assert overall.summary.average_precision == pytest.approx(0.75)
    assert overall.summary.average_recall == pytest.approx(0.5)
    assert overall.summary.average_iou == pytest.approx(0.45)
    assert overall.summary.total_processing_time_ms == pytest.approx(40.0)


def test_score_batch_of_nothing():
    overall = score_batch([])
    assert overall.grade == "F"
    assert overall.max_score == 0
    assert overall.test_results == []


def test_failure_result_is_zeroed():
    result = TestResult.failure("broken.png", "unreadable")
    assert result.score == 0
    assert not result.passed
    assert result.feedback == ["Error during testing: unreadable"]
    assert result.evaluation == EvaluationMetrics.zero()
