"""
Base image upload handling.

Validates the upload, recompresses large files, reads dimensions and stores
the bytes under the caller's project prefix.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from io import BytesIO
from uuid import UUID

from PIL import Image, UnidentifiedImageError

from core.config import get_settings
from core.exceptions import ValidationError

from .storage import StorageProvider

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
}

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

COMPRESS_MAX_SIDE = 2048
COMPRESS_QUALITY = 85

UNSUPPORTED_FORMAT_MESSAGE = "Formato de archivo no soportado. Por favor usa JPG, PNG, WebP o GIF."
FILE_TOO_LARGE_MESSAGE = "El archivo es demasiado grande. El tamaño máximo es 10MB."


def max_upload_bytes() -> int:
    return get_settings().max_upload_size_mb * 1024 * 1024


@dataclass
class PreparedUpload:
    """Bytes ready for storage, plus what we learned about them."""

    data: bytes
    content_type: str
    extension: str
    width: int | None = None
    height: int | None = None


def validate_upload(content_type: str | None, size: int) -> str:
    """
    Check type and size.

    Returns:
        The normalized content type

    Raises:
        ValidationError: unsupported type or too large
    """
    normalized = (content_type or "").lower()
    if normalized not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(UNSUPPORTED_FORMAT_MESSAGE)

    if size > max_upload_bytes():
        raise ValidationError(FILE_TOO_LARGE_MESSAGE)

    return normalized


def compress_image(data: bytes) -> bytes:
    """Downscale to COMPRESS_MAX_SIDE and re-encode as JPEG."""
    with Image.open(BytesIO(data)) as img:
        img = img.convert("RGB")
        img.thumbnail((COMPRESS_MAX_SIDE, COMPRESS_MAX_SIDE))
        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=COMPRESS_QUALITY, optimize=True)
        return buffer.getvalue()


def read_dimensions(data: bytes) -> tuple[int | None, int | None]:
    try:
        with Image.open(BytesIO(data)) as img:
            return img.width, img.height
    except (UnidentifiedImageError, OSError):
        return None, None


def prepare_upload(data: bytes, content_type: str | None) -> PreparedUpload:
    """Validate, compress when over the threshold, and measure an upload."""
    normalized = validate_upload(content_type, len(data))
    extension = _EXTENSIONS[normalized]

    threshold = get_settings().compress_threshold_mb * 1024 * 1024
    if len(data) > threshold:
        try:
            compressed = compress_image(data)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Could not compress upload, storing original: {e}")
        else:
            logger.info(f"Compressed upload from {len(data)} to {len(compressed)} bytes")
            data, normalized, extension = compressed, "image/jpeg", "jpg"

    width, height = read_dimensions(data)
    return PreparedUpload(
        data=data,
        content_type=normalized,
        extension=extension,
        width=width,
        height=height,
    )


def build_storage_key(user_id: UUID, project_id: UUID, extension: str, timestamp: int | None = None) -> str:
    """``users/{user}/projects/{project}/{ts}-{hash}.{ext}``"""
    ts = timestamp if timestamp is not None else int(time.time() * 1000)
    suffix = hashlib.md5(f"{user_id}-{ts}".encode()).hexdigest()[:8]
    return f"users/{user_id}/projects/{project_id}/{ts}-{suffix}.{extension}"


def build_result_key(user_id: UUID, transformation_id: UUID, extension: str) -> str:
    return f"users/{user_id}/transformations/{transformation_id}.{extension}"


async def store_upload(
    storage: StorageProvider,
    user_id: UUID,
    project_id: UUID,
    upload: PreparedUpload,
) -> tuple[str, str]:
    """Save a prepared upload; returns ``(storage_key, public_url)``."""
    key = build_storage_key(user_id, project_id, upload.extension)
    stored = await storage.save(
        key,
        upload.data,
        content_type=upload.content_type,
        metadata={"user_id": str(user_id), "project_id": str(project_id)},
    )
    return key, stored.public_url or storage.get_public_url(key)
