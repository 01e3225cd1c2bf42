"""
Capacity arithmetic for 1-bit LSB embedding on the R, G and B channels
"""

from __future__ import annotations

import math
from typing import List

from ..models.stego_models import CapacityReport, FileEntry
from .container import (
    DATA_LEN_SIZE,
    HEADER_SIZE,
    NAME_LEN_SIZE,
    container_size,
    encode_varint,
)
from .encryption import SEALED_FRAME_OVERHEAD


BITS_PER_PIXEL = 3
APPROX_OVERHEAD = 1024


def capacity(width: int, height: int) -> int:
    """Bytes a width x height carrier can hold."""
    return width * height * BITS_PER_PIXEL // 8


def crypto_overhead(encrypted: bool) -> int:
    return SEALED_FRAME_OVERHEAD if encrypted else 0


def required_bytes(entries: List[FileEntry], encrypted: bool) -> int:
    """Exact embedded frame size for these entries."""
    return container_size(entries) + crypto_overhead(encrypted)


def required_for_single(name_len: int, data_len: int, encrypted: bool) -> int:
    """Same as ``required_bytes`` for one entry, from lengths alone."""
    return (
        HEADER_SIZE
        + len(encode_varint(1))
        + NAME_LEN_SIZE
        + name_len
        + DATA_LEN_SIZE
        + data_len
        + crypto_overhead(encrypted)
    )


def estimate_required(data_len: int, name_len: int = 0) -> int:
    """
    Conservative pre-flight estimate for one entry of unknown final shape

    Uses a flat 1 KiB allowance unless the exact sealed overhead for this name
    is larger, so the estimate never falls below the true requirement.
    """
    exact_overhead = required_for_single(name_len, 0, encrypted=True)
    return data_len + max(APPROX_OVERHEAD, exact_overhead)


def scale_needed(width: int, height: int, required: int) -> float:
    """Linear factor by which both sides must grow to hold ``required`` bytes."""
    available = capacity(width, height)
    if required <= available:
        return 1.0
    required_pixels = math.ceil(required * 8 / BITS_PER_PIXEL)
    return math.sqrt(required_pixels / (width * height))


def build_report(width: int, height: int, required: int) -> CapacityReport:
    available = capacity(width, height)
    return CapacityReport(
        width=width,
        height=height,
        available_bytes=available,
        required_bytes=required,
        fits=required <= available,
        scale_needed=scale_needed(width, height, required),
    )
