"""Tests for upload and prompt validation at the API boundary."""

import struct
import zlib

import pytest

from alttext.core.config import Settings
from alttext.core.errors import UploadRejectedError
from alttext.core.uploads import validate_image_upload, validate_prompt
from tests.conftest import make_image_bytes

pytestmark = [pytest.mark.fast]


@pytest.mark.parametrize(
    "fmt,filename,mime",
    [("PNG", "a.png", "image/png"), ("JPEG", "b.JPG", "image/jpeg"), ("GIF", "c.gif", "image/gif")],
)
def test_valid_images_return_mime(fmt, filename, mime):
    assert validate_image_upload(filename, make_image_bytes(fmt), Settings()) == mime


def test_missing_file_rejected():
    with pytest.raises(UploadRejectedError, match="No image file provided") as excinfo:
        validate_image_upload(None, None, Settings())
    assert excinfo.value.status_code == 400


def test_wrong_extension_rejected(png_bytes):
    with pytest.raises(UploadRejectedError, match="Only image files are allowed!"):
        validate_image_upload("notes.txt", png_bytes, Settings())


def test_oversized_file_rejected_with_413(png_bytes):
    settings = Settings(max_upload_bytes=1024 * 1024)
    with pytest.raises(UploadRejectedError) as excinfo:
        validate_image_upload("big.png", b"\0" * (1024 * 1024 + 1), settings)
    assert excinfo.value.status_code == 413
    assert "under 1MB" in excinfo.value.message


def test_corrupt_bytes_rejected():
    with pytest.raises(UploadRejectedError, match="valid image"):
        validate_image_upload("fake.png", b"definitely not a png", Settings())


def test_empty_file_rejected():
    with pytest.raises(UploadRejectedError, match="empty"):
        validate_image_upload("empty.png", b"", Settings())


def test_validate_prompt_trims():
    assert validate_prompt("  a tiger doing a handstand ") == "a tiger doing a handstand"


@pytest.mark.parametrize("prompt", [None, "", "   "])
def test_validate_prompt_rejects_blank(prompt):
    with pytest.raises(UploadRejectedError, match="Please enter a prompt first"):
        validate_prompt(prompt)


def _png_with_declared_size(width: int, height: int) -> bytes:
    """A 1x1 PNG whose IHDR claims width x height (CRC recomputed)."""
    data = bytearray(make_image_bytes("PNG", size=(1, 1)))
    # signature (8) + chunk length (4) + b"IHDR" (4), then width/height
    data[16:20] = struct.pack(">I", width)
    data[20:24] = struct.pack(">I", height)
    ihdr = bytes(data[12:29])
    data[29:33] = struct.pack(">I", zlib.crc32(ihdr) & 0xFFFFFFFF)
    return bytes(data)


def test_decompression_bomb_rejected_as_400():
    bomb = _png_with_declared_size(40000, 40000)
    assert len(bomb) < 1024
    with pytest.raises(UploadRejectedError, match="dimensions are too large") as excinfo:
        validate_image_upload("bomb.png", bomb, Settings())
    assert excinfo.value.status_code == 400
