"""Evaluation exports."""

from .ground_truth import GroundTruthDataset, load_ground_truth, parse_ground_truth, parse_shape
from .matching import DEFAULT_IOU_THRESHOLD, match_shapes, unmatched_ground_truth
from .metrics import evaluate
from .runner import build_test_result, run_evaluation
from .scoring import ImageScore, grade_for, score_batch, score_image

__all__ = [
    "DEFAULT_IOU_THRESHOLD",
    "GroundTruthDataset",
    "ImageScore",
    "build_test_result",
    "evaluate",
    "grade_for",
    "load_ground_truth",
    "match_shapes",
    "parse_ground_truth",
    "parse_shape",
    "run_evaluation",
    "score_batch",
    "score_image",
    "unmatched_ground_truth",
]
