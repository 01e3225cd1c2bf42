"""
Unit tests for sealing and opening encrypted containers
"""

import pytest

from stegano_lab.services.stegano.core.container import (
    HEADER_SIZE,
    VERSION,
    ByteReader,
    parse_header,
    serialize_container,
)
from stegano_lab.services.stegano.core.encryption import (
    CRYPTO_OVERHEAD,
    KDF_PARAMS,
    NONCE_SIZE,
    SALT_SIZE,
    SEALED_FRAME_OVERHEAD,
    TAG_SIZE,
    derive_key,
    open_sealed,
    seal_container,
)
from stegano_lab.services.stegano.core.errors import CorruptContainer, DecryptionFailed
from stegano_lab.services.stegano.models.stego_models import FileEntry, StegoContainer


@pytest.fixture
def container_bytes():
    container = StegoContainer(
        version=VERSION,
        encrypted=True,
        entries=[FileEntry(name="note.txt", data=b"attack at dawn")],
    )
    return serialize_container(container)


def open_frame(frame, password):
    reader = ByteReader(frame)
    version, encrypted = parse_header(reader.read(HEADER_SIZE))
    assert encrypted
    return open_sealed(reader, version, password, max_len=len(frame))


class TestKeyDerivation:

    def test_overhead_constants(self):
        assert CRYPTO_OVERHEAD == SALT_SIZE + NONCE_SIZE + TAG_SIZE == 44
        assert SEALED_FRAME_OVERHEAD == 54

    def test_version_one_work_factor_is_pinned(self):
        assert KDF_PARAMS[1] == (2**14, 8, 1)

    def test_deterministic_per_salt(self):
        salt = b"\x01" * SALT_SIZE
        assert derive_key("pw", salt, 1) == derive_key("pw", salt, 1)
        assert derive_key("pw", salt, 1) != derive_key("pw", b"\x02" * SALT_SIZE, 1)
        assert len(derive_key("pw", salt, 1)) == 32

    def test_empty_password_is_a_password(self):
        salt = b"\x03" * SALT_SIZE
        assert derive_key("", salt, 1) != derive_key(" ", salt, 1)


class TestSeal:

    def test_frame_layout(self, container_bytes):
        frame = seal_container(container_bytes, "pw", VERSION)
        assert len(frame) == len(container_bytes) + SEALED_FRAME_OVERHEAD
        assert frame[:HEADER_SIZE] == container_bytes[:HEADER_SIZE]
        # Plaintext does not appear in the frame
        assert b"attack at dawn" not in frame

    def test_fresh_salt_and_nonce(self, container_bytes):
        assert seal_container(container_bytes, "pw", VERSION) != seal_container(container_bytes, "pw", VERSION)

    def test_round_trip(self, container_bytes):
        frame = seal_container(container_bytes, "pw", VERSION)
        assert open_frame(frame, "pw") == container_bytes

    def test_wrong_password(self, container_bytes):
        frame = seal_container(container_bytes, "pw", VERSION)
        with pytest.raises(DecryptionFailed):
            open_frame(frame, "wrong")

    def test_missing_password(self, container_bytes):
        frame = seal_container(container_bytes, "pw", VERSION)
        with pytest.raises(DecryptionFailed):
            open_frame(frame, None)

    def test_tampered_ciphertext(self, container_bytes):
        frame = bytearray(seal_container(container_bytes, "pw", VERSION))
        frame[-1] ^= 0x01
        with pytest.raises(DecryptionFailed):
            open_frame(bytes(frame), "pw")

    def test_impossible_length_is_corrupt(self, container_bytes):
        frame = bytearray(seal_container(container_bytes, "pw", VERSION))
        frame[HEADER_SIZE:HEADER_SIZE + 4] = (10).to_bytes(4, "big")
        with pytest.raises(CorruptContainer):
            open_frame(bytes(frame), "pw")
