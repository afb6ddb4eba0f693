"""Validate and store uploaded post images on local disk."""

import logging
import re
import secrets
import time
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import UploadFile

from pictura.core.errors import InternalError, ValidationError

if TYPE_CHECKING:
    from pictura.core.config import Settings

logger = logging.getLogger(__name__)

IMAGE_URL_PREFIX = "/uploads/images"
FILENAME_PREFIX = "post"

# Only keep short, plain extensions from client file names.
SAFE_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,8}$")


def _is_image(upload: UploadFile) -> bool:
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    return content_type.startswith("image/")


def build_image_filename(original_name: str | None) -> str:
    """Unique storage name: post-<epoch ms>-<random><ext>."""
    ext = Path(original_name or "").suffix.lower()
    if not SAFE_EXTENSION_RE.match(ext):
        ext = ""
    return f"{FILENAME_PREFIX}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


async def save_post_image(upload: UploadFile | None, settings: "Settings") -> tuple[str, str]:
    """
    Store an uploaded image under UPLOAD_DIR and return (filename, public url).

    Raises ValidationError when the upload is missing, not an image, empty or too large.
    Raises InternalError when the file cannot be written.
    """
    if upload is None or not getattr(upload, "filename", None):
        raise ValidationError("You must upload an image")
    if not _is_image(upload):
        raise ValidationError("Only image files are allowed (JPEG, PNG, GIF, WebP, etc.)")
    content = await upload.read()
    if not content:
        raise ValidationError("Uploaded image is empty")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File is too large. Maximum {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB"
        )

    directory = Path(settings.UPLOAD_DIR)
    filename = build_image_filename(upload.filename)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / filename).write_bytes(content)
    except OSError as e:
        logger.error("Could not write image %s: %s", filename, e)
        raise InternalError("Could not store the uploaded image") from e
    logger.debug("Stored image %s (%s bytes)", filename, len(content))
    return filename, f"{IMAGE_URL_PREFIX}/{filename}"


def remove_post_image(filename: str, settings: "Settings") -> None:
    """Delete a stored image; a file that is already gone is ignored."""
    try:
        (Path(settings.UPLOAD_DIR) / filename).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove image %s: %s", filename, e)
