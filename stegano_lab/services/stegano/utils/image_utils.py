"""
Image utility functions for steganography operations
"""

from __future__ import annotations

from io import BytesIO
from typing import Dict, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import InvalidImageFormat, UnsupportedOutputFormat
from ..models.stego_models import CarrierImage, OutputFormat


MEDIA_TYPES: Dict[OutputFormat, str] = {
    OutputFormat.png: "image/png",
    OutputFormat.webp: "image/webp",
}

# Longest side each encoder accepts; None means no practical limit
MAX_SIDE: Dict[OutputFormat, Optional[int]] = {
    OutputFormat.png: None,
    OutputFormat.webp: 16383,
}


def resolve_output_format(value: Union[str, OutputFormat]) -> OutputFormat:
    """
    Map a requested format name onto a lossless encoder

    Raises:
        UnsupportedOutputFormat: For lossy or unknown formats (jpeg, avif, ...)
    """
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(str(value).strip().lower())
    except ValueError as exc:
        raise UnsupportedOutputFormat(
            f"Unsupported output format {value!r}: only lossless png or webp keep hidden bits intact"
        ) from exc


def max_side(fmt: OutputFormat) -> Optional[int]:
    return MAX_SIDE[fmt]


def check_output_size(width: int, height: int, fmt: OutputFormat) -> None:
    """
    Raises:
        UnsupportedOutputFormat: If the encoder cannot write an image this large
    """
    limit = max_side(fmt)
    if limit is not None and max(width, height) > limit:
        raise UnsupportedOutputFormat(
            f"{fmt.value} cannot encode {width}x{height}: sides are limited to {limit} pixels"
        )


def load_carrier(data: bytes, output_format: OutputFormat = OutputFormat.png) -> CarrierImage:
    """
    Decode image bytes into the canonical RGBA8 grid

    Only the first frame of animated inputs is used.

    Args:
        data: Encoded image
        output_format: Lossless encoding the grid will be written back with

    Raises:
        InvalidImageFormat: If the bytes are not a decodable image
    """
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise InvalidImageFormat(f"Failed to load image: {exc}") from exc

    pixels = np.array(rgba, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidImageFormat("Image has no pixels")
    return CarrierImage(pixels=pixels, output_format=output_format)


def encode_carrier(pixels: np.ndarray, fmt: OutputFormat, png_compress_level: int = 6) -> bytes:
    """
    Encode an RGBA8 grid losslessly

    Args:
        pixels: RGBA8 grid of shape (height, width, 4)
        fmt: Lossless output format
        png_compress_level: zlib level for PNG output (0-9)

    Returns:
        Encoded image bytes

    Raises:
        UnsupportedOutputFormat: If the encoder rejects the image
    """
    height, width = pixels.shape[:2]
    check_output_size(width, height, fmt)
    image = Image.fromarray(pixels)
    buffer = BytesIO()
    try:
        if fmt == OutputFormat.webp:
            # exact keeps RGB under fully transparent pixels
            image.save(buffer, format="WEBP", lossless=True, exact=True, quality=100, method=6)
        else:
            image.save(buffer, format="PNG", compress_level=max(0, min(9, int(png_compress_level))))
    except (OSError, ValueError) as exc:
        raise UnsupportedOutputFormat(f"Failed to encode {fmt.value}: {exc}") from exc
    return buffer.getvalue()


def media_type(fmt: OutputFormat) -> str:
    return MEDIA_TYPES[fmt]
