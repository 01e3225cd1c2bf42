"""
Validation utilities for steganography operations
"""

from typing import List, Optional

from ..core.container import MAX_DATA_BYTES, MAX_NAME_BYTES
from ..core.errors import InvalidFileEntry, StegoError
from ..models.stego_models import FileEntry


def validate_entries(entries: List[FileEntry]) -> None:
    """
    Validate entries before any image work is done

    Args:
        entries: Entries to hide

    Raises:
        InvalidFileEntry: If the list is empty or an entry exceeds a length field
    """
    if not entries:
        raise InvalidFileEntry("At least one file entry is required")
    for entry in entries:
        name_len = len(entry.name.encode("utf-8"))
        if name_len > MAX_NAME_BYTES:
            raise InvalidFileEntry(f"File name exceeds {MAX_NAME_BYTES} bytes: {name_len}")
        if len(entry.data) > MAX_DATA_BYTES:
            raise InvalidFileEntry(f"File data exceeds {MAX_DATA_BYTES} bytes: {len(entry.data)}")


def validate_password(password: Optional[str]) -> None:
    """
    Validate the optional password

    ``None`` means no password. An empty string is a real password.

    Raises:
        StegoError: If password is neither None nor a string
    """
    if password is not None and not isinstance(password, str):
        raise StegoError(f"Invalid password type: {type(password)}")
