"""Global-threshold binarization with automatic polarity detection."""

from __future__ import annotations

import numpy as np

from .image_utils import luminance
from .types import BinaryMask, PixelBuffer


class Binarizer:
    """Splits an image into foreground and background around its mean luminance.

    Whichever luminance class holds fewer pixels is taken to be the shapes, so
    both dark-on-light and light-on-dark drawings produce a foreground mask.
    """

    def binarize(self, buffer: PixelBuffer) -> BinaryMask:
        gray = luminance(buffer)
        avg = gray.sum(dtype=np.int64) / gray.size

        dark_pixels = int(np.count_nonzero(gray < avg))
        light_pixels = gray.size - dark_pixels
        shapes_are_light = light_pixels < dark_pixels

        if shapes_are_light:
            mask = gray > avg
        else:
            mask = gray < avg
        return BinaryMask(mask=mask, shapes_are_light=shapes_are_light)
