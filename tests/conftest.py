# Stegano Lab test configuration
# Image fixtures shared by unit and integration tests

from io import BytesIO

import numpy as np
import pytest
from PIL import Image


def encode_png(array: np.ndarray) -> bytes:
    buf = BytesIO()
    Image.fromarray(array).save(buf, format="PNG")
    return buf.getvalue()


def decode_rgba(data: bytes) -> np.ndarray:
    with Image.open(BytesIO(data)) as img:
        return np.array(img.convert("RGBA"))


@pytest.fixture
def rng():
    """Deterministic random generator for test data."""
    return np.random.default_rng(1234)


@pytest.fixture
def opaque_carrier(rng):
    """100x100 opaque noise carrier (capacity 3750 bytes) as PNG bytes."""
    arr = rng.integers(0, 256, size=(100, 100, 4), dtype=np.uint8)
    arr[:, :, 3] = 255
    return encode_png(arr)


@pytest.fixture
def small_carrier(rng):
    """10x10 carrier (capacity 37 bytes) as PNG bytes."""
    arr = rng.integers(0, 256, size=(10, 10, 4), dtype=np.uint8)
    arr[:, :, 3] = 255
    return encode_png(arr)


@pytest.fixture
def transparent_carrier(rng):
    """64x48 carrier with varied alpha, including fully transparent pixels."""
    arr = rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)
    arr[:8, :, 3] = 0
    return encode_png(arr)


@pytest.fixture
def secret_500(rng):
    return rng.integers(0, 256, size=500, dtype=np.uint8).tobytes()
