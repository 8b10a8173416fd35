"""High level API that runs the detection pipeline over one image."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from .binarizer import Binarizer
from .classifier import ShapeClassifier
from .errors import InputError
from .features import FeatureExtractor
from .image_utils import ImageInput, load_image
from .segmenter import Segmenter
from .types import DetectedShape, DetectionResult, PixelBuffer, ShapeType

logger = logging.getLogger(__name__)


class ShapeDetector:
    """Binarizes, segments, measures and classifies the shapes in an image."""

    def __init__(
        self,
        binarizer: Optional[Binarizer] = None,
        segmenter: Optional[Segmenter] = None,
        classifier: Optional[ShapeClassifier] = None,
    ) -> None:
        self.binarizer = binarizer or Binarizer()
        self.segmenter = segmenter or Segmenter()
        self.classifier = classifier or ShapeClassifier()

    def detect(self, buffer: PixelBuffer) -> DetectionResult:
        """Return every shape found in the buffer, in region scan order."""

        if not isinstance(buffer, PixelBuffer):
            raise InputError(f"Expected a PixelBuffer, got {type(buffer).__name__}")
        if buffer.width == 0 or buffer.height == 0:
            raise InputError("Cannot detect shapes in an empty pixel buffer")

        start = time.perf_counter()
        mask = self.binarizer.binarize(buffer)
        regions = self.segmenter.segment(mask)
        extractor = FeatureExtractor(mask)

        shapes: List[DetectedShape] = []
        for region in regions:
            shape = self.classifier.classify(extractor.extract(region))
            if shape is not None:
                shapes.append(shape)
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.debug(
            "Detected %d shapes from %d regions in %.1fms (%s shapes)",
            len(shapes),
            len(regions),
            elapsed_ms,
            "light" if mask.shapes_are_light else "dark",
        )
        return DetectionResult(
            shapes=shapes,
            processing_time_ms=elapsed_ms,
            image_width=buffer.width,
            image_height=buffer.height,
        )

    def analyze(self, image_input: ImageInput) -> DetectionResult:
        """Load a path, array or PIL image and detect the shapes in it."""

        return self.detect(load_image(image_input))

    def predict_labels(self, image_input: ImageInput) -> List[str]:
        """Convenience helper that only returns the shape labels."""

        return [shape.type.value for shape in self.analyze(image_input).shapes]

    def available_shapes(self) -> List[ShapeType]:
        """Expose which shape types the classifier can report."""

        return [rule.shape for rule in self.classifier.rules]
