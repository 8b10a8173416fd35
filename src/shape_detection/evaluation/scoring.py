"""Weighted 0-100 image scores and batch grades."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..types import BatchSummary, EvaluationMetrics, OverallResult, TestResult

Band = Tuple[float, int]  # (cutoff, points)

F1_BANDS: Sequence[Band] = ((0.9, 40), (0.7, 30), (0.5, 20))
IOU_BANDS: Sequence[Band] = ((0.8, 25), (0.6, 20), (0.4, 10))
CENTER_BANDS: Sequence[Band] = ((5.0, 15), (10.0, 12), (20.0, 8))
AREA_BANDS: Sequence[Band] = ((0.9, 10), (0.8, 8), (0.7, 5))
TIME_BANDS: Sequence[Band] = ((500.0, 10), (1000.0, 8), (2000.0, 5))

PASS_SCORE = 60
GRADE_CUTOFFS: Sequence[Tuple[float, str]] = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))
FAILING_GRADE = "F"

_LOCALIZATION_LABELS = ("✓ Excellent", "✓ Good", "△ Fair")


@dataclass(frozen=True)
class ImageScore:
    score: int
    passed: bool
    feedback: List[str] = field(default_factory=list)


def band_points(value: float, bands: Sequence[Band], higher_is_better: bool = True) -> int:
    """Points for the first band whose cutoff the value reaches, else 0."""

    for cutoff, points in bands:
        if (value >= cutoff) if higher_is_better else (value <= cutoff):
            return points
    return 0


def _band_index(value: float, bands: Sequence[Band]) -> int:
    for index, (cutoff, _) in enumerate(bands):
        if value >= cutoff:
            return index
    return len(bands)


def score_image(metrics: EvaluationMetrics) -> ImageScore:
    """Turn one image's metrics into a score out of 100 with feedback lines."""

    f1 = metrics.f1_score
    iou = metrics.average_iou
    center = metrics.center_point_accuracy
    area = metrics.area_accuracy
    elapsed = metrics.processing_time_ms

    score = (
        band_points(f1, F1_BANDS)
        + band_points(iou, IOU_BANDS)
        + band_points(center, CENTER_BANDS, higher_is_better=False)
        + band_points(area, AREA_BANDS)
        + band_points(elapsed, TIME_BANDS, higher_is_better=False)
    )

    iou_band = _band_index(iou, IOU_BANDS)
    localization = _LOCALIZATION_LABELS[iou_band] if iou_band < len(IOU_BANDS) else "✗ Poor"
    feedback = [
        f"detection accuracy (F1: {f1:.3f})",
        f"{localization} localization (IoU: {iou:.3f})",
        f"center accuracy ({center:.1f}px error)",
        f"area calculation ({area * 100:.1f}% accuracy)",
        f"performance ({elapsed:.0f}ms)",
    ]
    return ImageScore(score=score, passed=score >= PASS_SCORE, feedback=feedback)


def grade_for(percentage: float) -> str:
    for cutoff, grade in GRADE_CUTOFFS:
        if percentage >= cutoff:
            return grade
    return FAILING_GRADE


def score_batch(test_results: Sequence[TestResult]) -> OverallResult:
    """Fold per-image results into a total score, percentage and letter grade."""

    count = len(test_results)
    if count == 0:
        return OverallResult(
            total_score=0,
            max_score=0,
            percentage=0.0,
            grade=FAILING_GRADE,
            test_results=[],
            summary=BatchSummary(0.0, 0.0, 0.0, 0.0, 0.0),
        )

    total_score = sum(result.score for result in test_results)
    max_score = 100 * count
    percentage = total_score / max_score * 100

    evaluations = [result.evaluation for result in test_results]
    summary = BatchSummary(
        average_precision=sum(e.precision for e in evaluations) / count,
        average_recall=sum(e.recall for e in evaluations) / count,
        average_f1=sum(e.f1_score for e in evaluations) / count,
        average_iou=sum(e.average_iou for e in evaluations) / count,
        total_processing_time_ms=sum(e.processing_time_ms for e in evaluations),
    )
    return OverallResult(
        total_score=int(round(total_score)),
        max_score=max_score,
        percentage=round(percentage, 2),
        grade=grade_for(percentage),
        test_results=list(test_results),
        summary=summary,
    )
