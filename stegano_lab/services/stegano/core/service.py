"""
Main service class for Image Steganography operations
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from stegano_lab.utility.constants_manager import ConstantsManager
from ..models.stego_models import (
    CapacityReport,
    FileEntry,
    OutputFormat,
    StegoContainer,
    StegoHideResult,
)
from ..utils.image_utils import (
    check_output_size,
    encode_carrier,
    load_carrier,
    max_side,
    resolve_output_format,
)
from ..utils.validation import validate_entries, validate_password
from .capacity import build_report, capacity, estimate_required, required_bytes, required_for_single
from .container import (
    HEADER_SIZE,
    VERSION,
    deserialize_container,
    parse_header,
    read_container_body,
    serialize_container,
)
from .encryption import SEALED_LEN_SIZE, open_sealed, seal_container
from .errors import CorruptContainer, InsufficientCapacity, NoHiddenDataOrWrongPassword
from .resize import upscale_to_fit
from .steganography import LsbReader, embed_bits_into_pixels


logger = logging.getLogger(__name__)


def build_frame(entries: List[FileEntry], password: Optional[str]) -> bytes:
    """Serialize entries and seal them when a password is given."""
    container = StegoContainer(version=VERSION, encrypted=password is not None, entries=list(entries))
    frame = serialize_container(container)
    if password is not None:
        frame = seal_container(frame, password, VERSION)
    return frame


def read_frame(pixels: np.ndarray, password: Optional[str]) -> StegoContainer:
    """
    Parse the frame embedded in a pixel grid

    Raises:
        NoHiddenDataOrWrongPassword: Or one of its subclasses, when nothing
            valid can be recovered
    """
    reader = LsbReader(pixels)
    version, encrypted = parse_header(reader.read(HEADER_SIZE))
    if not encrypted:
        return read_container_body(reader, version, encrypted)

    plaintext = open_sealed(reader, version, password, max_len=reader.remaining - SEALED_LEN_SIZE)
    container = deserialize_container(plaintext)
    if not container.encrypted or container.version != version:
        raise CorruptContainer()
    return container


class ImageStegoService:
    """
    Main service class for Image Steganography operations

    Hides named files in a carrier image and recovers them. Instances hold
    only read-only configuration and can be shared between threads.
    """

    def __init__(
        self,
        default_output_format: Union[str, OutputFormat, None] = None,
        max_output_pixels: Optional[int] = None,
        png_compress_level: Optional[int] = None,
    ):
        constants = ConstantsManager()
        self.default_output_format = resolve_output_format(
            default_output_format or constants.get_default_output_format()
        )
        self.max_output_pixels = (
            max_output_pixels if max_output_pixels is not None else constants.get_max_output_pixels()
        )
        self.png_compress_level = (
            png_compress_level if png_compress_level is not None else constants.get_png_compress_level()
        )

    def capacity_report(
        self,
        carrier: bytes,
        data_len: int,
        name_len: int = 0,
        encrypted: bool = False,
        estimate: bool = False,
    ) -> CapacityReport:
        """
        Check whether a pending secret fits a carrier without embedding anything

        Args:
            carrier: Encoded carrier image
            data_len: Size of the secret in bytes
            name_len: UTF-8 length of the secret's name
            encrypted: Whether a password will be used
            estimate: Use the flat pre-flight estimate instead of the exact size

        Returns:
            CapacityReport for the carrier
        """
        image = load_carrier(carrier)
        if estimate:
            required = estimate_required(data_len, name_len)
        else:
            required = required_for_single(name_len, data_len, encrypted)
        return build_report(image.width, image.height, required)

    def hide_entries(
        self,
        carrier: bytes,
        entries: List[FileEntry],
        password: Optional[str] = None,
        auto_resize: bool = False,
        output_format: Union[str, OutputFormat, None] = None,
    ) -> Tuple[bytes, StegoHideResult]:
        """
        Hide an ordered list of files in a carrier image

        Args:
            carrier: Encoded carrier image
            entries: Files to hide, order is preserved
            password: Optional password; None disables encryption
            auto_resize: Upscale the carrier when it is too small
            output_format: png or webp, defaults to the configured format

        Returns:
            Tuple of (encoded_stego_image, result_metadata)

        Raises:
            InvalidFileEntry: If an entry cannot be represented
            UnsupportedOutputFormat: If the output format is not lossless or
                cannot encode an image of this size
            InvalidImageFormat: If the carrier cannot be decoded
            InsufficientCapacity: If the payload does not fit and resizing is off
                or would exceed the output size limits
        """
        validate_password(password)
        validate_entries(entries)
        fmt = resolve_output_format(output_format or self.default_output_format)
        image = load_carrier(carrier, fmt)
        check_output_size(image.width, image.height, image.output_format)

        encrypted = password is not None
        required = required_bytes(entries, encrypted)
        available = capacity(image.width, image.height)
        pixels = image.pixels
        resized = False
        if required > available:
            if not auto_resize:
                raise InsufficientCapacity(required=required, available=available)
            pixels = upscale_to_fit(
                pixels, required, self.max_output_pixels, max_side=max_side(image.output_format)
            )
            resized = True

        frame = build_frame(entries, password)
        stego_pixels = embed_bits_into_pixels(pixels, frame)
        output = encode_carrier(stego_pixels, image.output_format, self.png_compress_level)

        height, width = stego_pixels.shape[:2]
        logger.info(
            "Hid %d file(s), %d byte frame in %dx%d %s carrier (resized=%s, encrypted=%s)",
            len(entries), len(frame), width, height, image.output_format.value, resized, encrypted,
        )
        result = StegoHideResult(
            width=width,
            height=height,
            resized=resized,
            output_format=image.output_format,
            payload_size_bytes=len(frame),
            capacity_bytes=capacity(width, height),
            encrypted=encrypted,
            encryption="AES-GCM" if encrypted else None,
            kdf="Scrypt" if encrypted else None,
        )
        return output, result

    def hide(
        self,
        carrier: bytes,
        name: str,
        secret: bytes,
        password: Optional[str] = None,
        auto_resize: bool = False,
        output_format: Union[str, OutputFormat, None] = None,
    ) -> Tuple[bytes, StegoHideResult]:
        """Hide a single named file. See ``hide_entries``."""
        return self.hide_entries(
            carrier,
            [FileEntry(name=name, data=secret)],
            password=password,
            auto_resize=auto_resize,
            output_format=output_format,
        )

    def unveil(self, carrier: bytes, password: Optional[str] = None) -> List[FileEntry]:
        """
        Recover hidden files from a carrier image

        Args:
            carrier: Encoded stego image
            password: Password used when hiding, or None

        Returns:
            Hidden entries in their original order; an empty list when there is
            no hidden data or the password is wrong

        Raises:
            InvalidImageFormat: If the carrier cannot be decoded
        """
        validate_password(password)
        image = load_carrier(carrier)
        try:
            container = read_frame(image.pixels, password)
        except NoHiddenDataOrWrongPassword:
            logger.debug("No hidden data found or wrong password")
            return []
        logger.info("Unveiled %d file(s) from %dx%d carrier", len(container.entries), image.width, image.height)
        return container.entries


def hide(
    carrier: bytes,
    name: str,
    secret: bytes,
    password: Optional[str] = None,
    auto_resize: bool = False,
    output_format: Union[str, OutputFormat] = OutputFormat.png,
) -> bytes:
    image_bytes, _ = ImageStegoService().hide(
        carrier, name, secret, password=password, auto_resize=auto_resize, output_format=output_format
    )
    return image_bytes


def unveil(carrier: bytes, password: Optional[str] = None) -> List[FileEntry]:
    return ImageStegoService().unveil(carrier, password=password)
