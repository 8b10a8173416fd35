#!/usr/bin/env python3
"""Batch shape detection and scoring against a ground-truth file."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from shape_detection import GroundTruthError, OverallResult, ShapeDetector, load_ground_truth, run_evaluation
from shape_detection.evaluation import DEFAULT_IOU_THRESHOLD

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff"}


def collect_images(folder_path: str) -> Dict[str, Path]:
    """Map file name to path for every image in the folder, sorted by name."""

    folder = Path(folder_path)
    if not folder.exists():
        print(f"❌ Folder not found: {folder_path}")
        return {}

    image_files = sorted(
        f for f in folder.iterdir() if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
    )
    if not image_files:
        print(f"⚠️  No images found in: {folder_path}")
    return {f.name: f for f in image_files}


def evaluate_folder(
    folder_path: str,
    ground_truth_path: str,
    selected: Optional[List[str]] = None,
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> Optional[OverallResult]:
    """Detect shapes in every image of a folder and score them.

    Args:
        folder_path: folder holding the test images
        ground_truth_path: JSON annotation file keyed by image file name
        selected: optional subset of image names, evaluated in the given order
        iou_threshold: minimum IoU for a detection to count as a match

    Returns:
        The batch result, or None when there was nothing to evaluate
    """
    images = collect_images(folder_path)
    if not images:
        return None

    try:
        ground_truth = load_ground_truth(ground_truth_path)
    except (OSError, GroundTruthError) as e:
        print(f"❌ Failed to load ground truth: {e}")
        return None
    image_ids = selected or list(images)

    print(f"📁 Found {len(images)} images, evaluating {len(image_ids)}")
    print("🔍 Running detection...\n")
    print("=" * 80)

    results = run_evaluation(
        ShapeDetector(),
        images,
        ground_truth,
        image_ids=image_ids,
        iou_threshold=iou_threshold,
    )

    for idx, test_result in enumerate(results.test_results, 1):
        status = "✅" if test_result.passed else "❌"
        detection = test_result.detection
        print(f"\n[{idx}/{len(results.test_results)}] {status} {test_result.image_id}")
        print(f"  Detected: {len(detection.shapes)} shapes in {detection.processing_time_ms:.0f}ms")
        for shape in detection.shapes:
            print(
                f"     - {shape.type.value}: {shape.confidence:.1%} "
                f"at ({shape.center.x:.1f}, {shape.center.y:.1f}), area {shape.area}px²"
            )
        for line in test_result.feedback:
            print(f"  {line}")

    return results


def print_summary(results: OverallResult) -> None:
    summary = results.summary
    print("\n" + "=" * 80)
    print("📊 Evaluation summary")
    print("=" * 80)
    print(f"\nScore: {results.total_score}/{results.max_score} ({results.percentage:.2f}%)  Grade: {results.grade}")
    print(f"  - Average precision: {summary.average_precision * 100:.1f}%")
    print(f"  - Average recall: {summary.average_recall * 100:.1f}%")
    print(f"  - Average F1 score: {summary.average_f1:.3f}")
    print(f"  - Average IoU: {summary.average_iou:.3f}")
    print(f"  - Total processing time: {summary.total_processing_time_ms:.0f}ms")
    print("\n" + "=" * 80)


def save_results_to_json(results: OverallResult, output_file: str) -> None:
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(results.to_dict(), f, ensure_ascii=False, indent=2)
        print(f"💾 Results saved to: {output_file}")
    except OSError as e:
        print(f"❌ Failed to save results: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("images", help="folder containing the test images")
    parser.add_argument("ground_truth", help="ground truth JSON file")
    parser.add_argument("--select", nargs="+", metavar="NAME", help="only evaluate these image names")
    parser.add_argument("--output", default="evaluation_results.json", help="where to write the JSON report")
    parser.add_argument("--iou-threshold", type=float, default=DEFAULT_IOU_THRESHOLD)
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("\n" + "=" * 80)
    print("🖼️  Shape detection evaluation")
    print("=" * 80)
    print(f"📂 Images: {args.images}")
    print(f"🏷️  Ground truth: {args.ground_truth}")
    print(f"📊 IoU threshold: {args.iou_threshold:.2f}\n")

    results = evaluate_folder(args.images, args.ground_truth, args.select, args.iou_threshold)
    if results is None:
        return 1

    print_summary(results)
    save_results_to_json(results, args.output)
    print("\n✅ Done!\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
