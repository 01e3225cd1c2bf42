from __future__ import annotations

from enum import Enum
from typing import List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class OutputFormat(str, Enum):
    png = "png"
    webp = "webp"


class FileEntry(BaseModel):
    name: str
    data: bytes


class StegoContainer(BaseModel):
    """Ordered named entries plus the header fields that describe them."""

    version: int = 1
    encrypted: bool = False
    entries: List[FileEntry] = Field(default_factory=list)


class CarrierImage(BaseModel):
    """Canonical RGBA8 pixel grid, shape (height, width, 4), and the lossless encoding it is written back with."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    pixels: np.ndarray
    output_format: OutputFormat = OutputFormat.png

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


class CapacityReport(BaseModel):
    width: int
    height: int
    available_bytes: int
    required_bytes: int
    fits: bool
    scale_needed: float = Field(default=1.0, description="Linear upscale factor needed to fit, 1.0 when it already fits")


class StegoHideResult(BaseModel):
    width: int
    height: int
    resized: bool = False
    output_format: OutputFormat = OutputFormat.png
    payload_size_bytes: int
    capacity_bytes: int
    encrypted: bool = False
    encryption: Optional[str] = None
    kdf: Optional[str] = None


class UnveiledFile(BaseModel):
    name: str
    size_bytes: int
    data_base64: str


class StegoUnveilResult(BaseModel):
    files: List[UnveiledFile] = Field(default_factory=list)
