"""
Core steganography algorithms for LSB embedding and extraction

Payload bits are streamed most-significant first across the R, G and B
low bits of consecutive pixels in raster order:

    byte0.bit7 -> p0.R, byte0.bit6 -> p0.G, byte0.bit5 -> p0.B,
    byte0.bit4 -> p1.R, ... byte1.bit7 -> p2.G, ...

Alpha is never touched.
"""

from __future__ import annotations

import numpy as np

from .capacity import BITS_PER_PIXEL, capacity
from .errors import CorruptContainer, InsufficientCapacity


def _pixel_rows(pixels: np.ndarray) -> np.ndarray:
    # (height, width, 4) -> (height * width, 4) view in raster order
    return pixels.reshape(-1, pixels.shape[-1])


def embed_bits_into_pixels(pixels: np.ndarray, payload: bytes) -> np.ndarray:
    """
    Embed payload bits into a copy of the pixel grid

    Args:
        pixels: RGBA8 grid of shape (height, width, 4)
        payload: Frame bytes to embed

    Returns:
        New grid with the payload in the channel LSBs; the input is not modified

    Raises:
        InsufficientCapacity: If the payload does not fit (checked before any write)
    """
    height, width = pixels.shape[:2]
    available = capacity(width, height)
    if len(payload) > available:
        raise InsufficientCapacity(required=len(payload), available=available)

    out = np.array(pixels, dtype=np.uint8, copy=True, order="C")
    if not payload:
        return out

    bits = np.unpackbits(np.frombuffer(payload, dtype=np.uint8))
    num_bits = bits.shape[0]
    num_pixels = -(-num_bits // BITS_PER_PIXEL)

    rows = _pixel_rows(out)
    channels = rows[:num_pixels, :BITS_PER_PIXEL].reshape(-1)
    channels[:num_bits] = (channels[:num_bits] & 0xFE) | bits
    rows[:num_pixels, :BITS_PER_PIXEL] = channels.reshape(num_pixels, BITS_PER_PIXEL)
    return out


def extract_bytes(pixels: np.ndarray, offset: int, size: int) -> bytes:
    """
    Read ``size`` payload bytes starting at byte ``offset``

    Only the pixels covering the requested bit range are read.
    """
    start_bit = offset * 8
    end_bit = start_bit + size * 8
    first_pixel = start_bit // BITS_PER_PIXEL
    last_pixel = -(-end_bit // BITS_PER_PIXEL)

    rows = _pixel_rows(pixels)
    channels = rows[first_pixel:last_pixel, :BITS_PER_PIXEL].reshape(-1)
    skip = start_bit - first_pixel * BITS_PER_PIXEL
    bits = channels[skip : skip + size * 8] & 0x01
    return np.packbits(bits).tobytes()


class LsbReader:
    """Sequential payload reader over a pixel grid."""

    def __init__(self, pixels: np.ndarray):
        height, width = pixels.shape[:2]
        self._pixels = pixels
        self._capacity = capacity(width, height)
        self._offset = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        return self._capacity - self._offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise CorruptContainer()
        if size == 0:
            return b""
        chunk = extract_bytes(self._pixels, self._offset, size)
        self._offset += size
        return chunk
