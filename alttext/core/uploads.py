"""Boundary validation for uploaded images and generation prompts."""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from alttext.core.config import Settings
from alttext.core.errors import UploadRejectedError
from alttext.core.file_extensions import PILLOW_FORMAT_MIME

_log = logging.getLogger(__name__)


def validate_image_upload(filename: str | None, content: bytes | None, settings: Settings) -> str:
    """
    Check an uploaded image before it reaches the inference core; return its MIME type.

    Raises UploadRejectedError (400 for missing/wrong type, 413 for oversized).
    """
    if not filename or content is None:
        raise UploadRejectedError("No image file provided")
    if Path(filename).suffix.lower() not in settings.allowed_extensions:
        raise UploadRejectedError("Only image files are allowed!")
    if len(content) == 0:
        raise UploadRejectedError("Uploaded image is empty")
    if len(content) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise UploadRejectedError(
            f"Image is too large. Please select an image under {limit_mb}MB.",
            status_code=413,
        )
    try:
        with Image.open(io.BytesIO(content)) as img:
            fmt = img.format
            img.verify()
    except Image.DecompressionBombError as e:
        _log.warning("Rejected %s: declared dimensions too large (%s)", filename, e)
        raise UploadRejectedError("Image dimensions are too large") from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        _log.debug("Rejected %s: not decodable as an image (%s)", filename, e)
        raise UploadRejectedError("Please select a valid image file") from e
    mime = PILLOW_FORMAT_MIME.get(fmt or "")
    if mime is None:
        raise UploadRejectedError("Only image files are allowed!")
    return mime


def validate_prompt(prompt: str | None) -> str:
    """Return the trimmed prompt, or raise UploadRejectedError when it is missing or blank."""
    if prompt is None or not prompt.strip():
        raise UploadRejectedError("Please enter a prompt first")
    return prompt.strip()
