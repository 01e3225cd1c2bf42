"""
Container codec: named file entries <-> one flat byte buffer

Layout (version 1, big-endian):

    MAGIC(4) | VERSION(1) | FLAGS(1) | ENTRY_COUNT(varint) |
    { NAME_LEN(2) | NAME | DATA_LEN(4) | DATA }*
"""

from __future__ import annotations

import struct
from typing import List, Protocol, Tuple

from ..models.stego_models import FileEntry, StegoContainer
from .errors import CorruptContainer, InvalidContainerHeader, InvalidFileEntry


MAGIC = b"STGL"
VERSION = 1
SUPPORTED_VERSIONS = (1,)

FLAG_ENCRYPTED = 0x01
KNOWN_FLAGS = FLAG_ENCRYPTED

HEADER_FORMAT = ">4sBB"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 6
NAME_LEN_SIZE = 2
DATA_LEN_SIZE = 4
ENTRY_FIXED_SIZE = NAME_LEN_SIZE + DATA_LEN_SIZE

MAX_NAME_BYTES = 0xFFFF
MAX_DATA_BYTES = 0xFFFFFFFF
MAX_VARINT_BYTES = 5


class ByteSource(Protocol):
    def read(self, size: int) -> bytes: ...


class ByteReader:
    """Sequential reader over an in-memory buffer."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise CorruptContainer()
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk


def encode_varint(value: int) -> bytes:
    if value < 0:
        raise ValueError("varint must be non-negative")
    out = bytearray()
    while True:
        group = value & 0x7F
        value >>= 7
        if value:
            out.append(group | 0x80)
        else:
            out.append(group)
            return bytes(out)


def read_varint(source: ByteSource) -> int:
    value = 0
    for i in range(MAX_VARINT_BYTES):
        byte = source.read(1)[0]
        value |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return value
    raise CorruptContainer()


def entry_size(entry: FileEntry) -> int:
    return ENTRY_FIXED_SIZE + len(entry.name.encode("utf-8")) + len(entry.data)


def container_size(entries: List[FileEntry]) -> int:
    return HEADER_SIZE + len(encode_varint(len(entries))) + sum(entry_size(e) for e in entries)


def pack_header(version: int, encrypted: bool) -> bytes:
    flags = FLAG_ENCRYPTED if encrypted else 0
    return struct.pack(HEADER_FORMAT, MAGIC, version, flags)


def parse_header(raw: bytes) -> Tuple[int, bool]:
    """
    Validate the fixed header before any length field is trusted

    Returns:
        Tuple of (version, encrypted)

    Raises:
        InvalidContainerHeader: On magic, version or flag mismatch
    """
    if len(raw) < HEADER_SIZE:
        raise InvalidContainerHeader()
    magic, version, flags = struct.unpack(HEADER_FORMAT, raw[:HEADER_SIZE])
    if magic != MAGIC or version not in SUPPORTED_VERSIONS or flags & ~KNOWN_FLAGS:
        raise InvalidContainerHeader()
    return version, bool(flags & FLAG_ENCRYPTED)


def serialize_container(container: StegoContainer) -> bytes:
    parts = [pack_header(container.version, container.encrypted), encode_varint(len(container.entries))]
    for entry in container.entries:
        name = entry.name.encode("utf-8")
        if len(name) > MAX_NAME_BYTES:
            raise InvalidFileEntry(f"Entry name is {len(name)} bytes, limit is {MAX_NAME_BYTES}")
        if len(entry.data) > MAX_DATA_BYTES:
            raise InvalidFileEntry(f"Entry data is {len(entry.data)} bytes, limit is {MAX_DATA_BYTES}")
        parts.append(struct.pack(">H", len(name)))
        parts.append(name)
        parts.append(struct.pack(">I", len(entry.data)))
        parts.append(entry.data)
    return b"".join(parts)


def read_container_body(source: ByteSource, version: int, encrypted: bool) -> StegoContainer:
    """
    Read entries following an already validated header

    Every length is read before the bytes it covers, so the source is never
    consumed past the declared size.

    Raises:
        CorruptContainer: On truncation or undecodable names
    """
    count = read_varint(source)
    entries: List[FileEntry] = []
    for _ in range(count):
        (name_len,) = struct.unpack(">H", source.read(NAME_LEN_SIZE))
        try:
            name = source.read(name_len).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptContainer() from exc
        (data_len,) = struct.unpack(">I", source.read(DATA_LEN_SIZE))
        entries.append(FileEntry(name=name, data=source.read(data_len)))
    return StegoContainer(version=version, encrypted=encrypted, entries=entries)


def deserialize_container(data: bytes) -> StegoContainer:
    version, encrypted = parse_header(data)
    reader = ByteReader(data)
    reader.read(HEADER_SIZE)
    container = read_container_body(reader, version, encrypted)
    if reader.remaining:
        raise CorruptContainer()
    return container
