"""Greedy, type-constrained IoU matching of detections to ground truth."""

from __future__ import annotations

from typing import List, Optional, Sequence, Set

from ..types import DetectedShape, GroundTruthShape, Match

DEFAULT_IOU_THRESHOLD = 0.5


def match_shapes(
    detected: Sequence[DetectedShape],
    ground_truth: Sequence[GroundTruthShape],
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> List[Match]:
    """Pair each detection with the best still-unclaimed ground-truth shape.

    Detections are visited in order and each one claims the same-type
    ground-truth shape with the highest IoU above ``iou_threshold``. Earlier
    detections therefore get first pick, and a ground-truth shape is never
    claimed twice. Detections left without a partner come back as unmatched
    :class:`Match` entries.
    """

    claimed: Set[int] = set()
    matches: List[Match] = []

    for shape in detected:
        best_index: Optional[int] = None
        best_iou = 0.0
        for index, truth in enumerate(ground_truth):
            if index in claimed or truth.type != shape.type:
                continue
            box = truth.box()
            if box is None:
                continue
            iou = shape.bounding_box.iou(box)
            if iou > best_iou and iou > iou_threshold:
                best_index = index
                best_iou = iou

        if best_index is None:
            matches.append(Match(detected=shape))
            continue
        claimed.add(best_index)
        matches.append(
            Match(
                detected=shape,
                ground_truth=ground_truth[best_index],
                ground_truth_index=best_index,
                iou=best_iou,
            )
        )
    return matches


def unmatched_ground_truth(
    matches: Sequence[Match], ground_truth: Sequence[GroundTruthShape]
) -> List[GroundTruthShape]:
    """Ground-truth shapes no detection claimed (the false negatives)."""

    claimed = {match.ground_truth_index for match in matches if match.is_true_positive}
    return [truth for index, truth in enumerate(ground_truth) if index not in claimed]
