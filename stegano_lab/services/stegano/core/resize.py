"""
Carrier upscaling when the payload does not fit
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from .capacity import capacity, scale_needed
from .errors import InsufficientCapacity


logger = logging.getLogger(__name__)


def fit_dimensions(width: int, height: int, required: int) -> Tuple[int, int]:
    """
    Smallest aspect-preserving dimensions whose capacity holds ``required`` bytes

    Never returns dimensions smaller than the input.
    """
    if required <= capacity(width, height):
        return width, height

    scale = scale_needed(width, height, required)
    # Grow the longer side one pixel at a time until rounding stops biting
    step = 1.0 / max(width, height)
    while True:
        new_width = max(width, math.ceil(width * scale))
        new_height = max(height, math.ceil(height * scale))
        if capacity(new_width, new_height) >= required:
            return new_width, new_height
        scale += step


def upscale_to_fit(
    pixels: np.ndarray,
    required: int,
    max_pixels: Optional[int] = None,
    max_side: Optional[int] = None,
) -> np.ndarray:
    """
    Resample the carrier so that it can hold ``required`` bytes

    Args:
        pixels: RGBA8 grid of shape (height, width, 4)
        required: Exact frame size in bytes
        max_pixels: Optional ceiling on the resized pixel count
        max_side: Optional ceiling on the resized width and height

    Returns:
        The input grid if it already fits, otherwise a new Lanczos-resampled grid

    Raises:
        InsufficientCapacity: If the resized carrier would exceed either ceiling
    """
    height, width = pixels.shape[:2]
    new_width, new_height = fit_dimensions(width, height, required)
    if (new_width, new_height) == (width, height):
        return pixels

    if (max_pixels and new_width * new_height > max_pixels) or (
        max_side and max(new_width, new_height) > max_side
    ):
        raise InsufficientCapacity(required=required, available=capacity(width, height))

    logger.debug(
        "Upscaling carrier %dx%d -> %dx%d for %d byte payload",
        width, height, new_width, new_height, required,
    )
    image = Image.fromarray(pixels)
    resized = image.resize((new_width, new_height), resample=Image.LANCZOS)
    return np.array(resized, dtype=np.uint8)
