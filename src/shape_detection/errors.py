"""Exceptions raised by the shape detection package."""

from __future__ import annotations


class ShapeDetectionError(Exception):
    """Base class for every error raised by this package."""


class InputError(ShapeDetectionError, ValueError):
    """Raised when a pixel buffer is malformed or has no pixels."""


class GroundTruthError(ShapeDetectionError, ValueError):
    """Raised when a ground-truth record or file cannot be parsed."""
