"""
Encryption utilities for steganography operations

A sealed frame wraps a serialized container:

    MAGIC | VERSION | FLAGS | SEALED_LEN(4) | SALT | NONCE | CIPHERTEXT | TAG

The ten leading bytes travel in the clear and are authenticated as AEAD
associated data.
"""

from __future__ import annotations

import os
import struct
from typing import Dict, NamedTuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .container import HEADER_SIZE, ByteSource, pack_header
from .errors import CorruptContainer, DecryptionFailed


SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
SEALED_LEN_SIZE = 4

CRYPTO_OVERHEAD = SALT_SIZE + NONCE_SIZE + TAG_SIZE
# Outer clear header and length field, plus salt, nonce and tag
SEALED_FRAME_OVERHEAD = HEADER_SIZE + SEALED_LEN_SIZE + CRYPTO_OVERHEAD


class ScryptParams(NamedTuple):
    n: int
    r: int
    p: int


# Work factor is pinned per container version; raise it only with a new version.
KDF_PARAMS: Dict[int, ScryptParams] = {
    1: ScryptParams(n=2**14, r=8, p=1),
}


def derive_key(password: str, salt: bytes, version: int) -> bytes:
    """
    Derive encryption key from password using Scrypt KDF

    Args:
        password: User password (an empty string is a valid password)
        salt: Random salt for key derivation
        version: Container version selecting the work factor

    Returns:
        Derived encryption key
    """
    params = KDF_PARAMS[version]
    kdf = Scrypt(salt=salt, length=KEY_SIZE, n=params.n, r=params.r, p=params.p)
    return kdf.derive(password.encode("utf-8"))


def _associated_data(version: int, sealed_len: int) -> bytes:
    return pack_header(version, True) + struct.pack(">I", sealed_len)


def seal_container(container_bytes: bytes, password: str, version: int) -> bytes:
    """
    Encrypt a serialized container into a sealed frame

    Args:
        container_bytes: Output of ``serialize_container``
        password: Password for encryption
        version: Container version

    Returns:
        Complete sealed frame ready for embedding
    """
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    sealed_len = SALT_SIZE + NONCE_SIZE + len(container_bytes) + TAG_SIZE
    aad = _associated_data(version, sealed_len)
    key = derive_key(password, salt, version)
    # AESGCM appends the tag to the ciphertext
    encrypted = AESGCM(key).encrypt(nonce, container_bytes, aad)
    return aad + salt + nonce + encrypted


def open_sealed(source: ByteSource, version: int, password: str | None, max_len: int) -> bytes:
    """
    Read and decrypt the rest of a sealed frame whose header was already parsed

    Args:
        source: Reader positioned just after the clear header
        version: Version from the clear header
        password: Password, or None when the caller supplied none
        max_len: Upper bound on the sealed length the carrier can hold

    Returns:
        Decrypted container bytes

    Raises:
        CorruptContainer: If the declared length is impossible
        DecryptionFailed: If no password was given or authentication fails
    """
    (sealed_len,) = struct.unpack(">I", source.read(SEALED_LEN_SIZE))
    if sealed_len < CRYPTO_OVERHEAD or sealed_len > max_len:
        raise CorruptContainer()
    if password is None:
        raise DecryptionFailed()
    sealed = source.read(sealed_len)
    salt = sealed[:SALT_SIZE]
    nonce = sealed[SALT_SIZE : SALT_SIZE + NONCE_SIZE]
    encrypted = sealed[SALT_SIZE + NONCE_SIZE :]
    key = derive_key(password, salt, version)
    try:
        return AESGCM(key).decrypt(nonce, encrypted, _associated_data(version, sealed_len))
    except InvalidTag as exc:
        raise DecryptionFailed() from exc
