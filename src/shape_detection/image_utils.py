"""Utility helpers for turning image inputs into pixel buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

from .errors import InputError
from .types import PixelBuffer

ImageInput = Union[str, Path, np.ndarray, Image.Image, PixelBuffer]


def load_image(image_input: ImageInput) -> PixelBuffer:
    """Load an image input into a read-only BGR (or gray) pixel buffer.

    Files are always decoded to 8-bit BGR. Arrays may be 8-bit or 16-bit;
    16-bit samples keep their high byte.
    """

    if isinstance(image_input, PixelBuffer):
        return image_input
    if isinstance(image_input, np.ndarray):
        image = image_input
    elif isinstance(image_input, Image.Image):
        image = _from_pil(image_input)
    elif isinstance(image_input, (str, Path)):
        path = Path(image_input)
        if not path.exists():
            raise FileNotFoundError(f"Image path not found: {path}")
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is None:
            raise InputError(f"Unable to read image from path: {path}")
    else:
        raise InputError(f"Unsupported image input type: {type(image_input).__name__}")

    return PixelBuffer(ensure_color(ensure_uint8(image)))


def ensure_uint8(image: np.ndarray) -> np.ndarray:
    """Scale 16-bit samples down to 8 bits. Other non-byte dtypes are rejected."""

    if image.dtype == np.uint8:
        return image
    if image.dtype.kind == "u" and image.dtype.itemsize == 2:
        return (image >> 8).astype(np.uint8)
    raise InputError(f"Unsupported pixel dtype: {image.dtype}")


def ensure_color(image: np.ndarray) -> np.ndarray:
    """Drop alpha from four-channel BGRA arrays; gray and BGR pass through."""

    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def luminance(buffer: PixelBuffer) -> np.ndarray:
    """Return the 8-bit luminance plane ``0.299R + 0.587G + 0.114B``.

    Values are rounded half-to-even and clamped to 0..255. Single-channel
    buffers are already luminance and are only clamped.
    """

    pixels = buffer.pixels
    if pixels.ndim == 2:
        gray = pixels.astype(np.float64)
    else:
        b = pixels[:, :, 0].astype(np.float64)
        g = pixels[:, :, 1].astype(np.float64)
        r = pixels[:, :, 2].astype(np.float64)
        gray = 0.299 * r + 0.587 * g + 0.114 * b
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def _from_pil(image: Image.Image) -> np.ndarray:
    if image.mode.startswith("I;16"):
        return np.array(image)
    if image.mode in ("L", "1", "I", "F"):
        return np.array(image.convert("L"))
    return cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2BGR)
