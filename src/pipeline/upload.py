# src/pipeline/upload.py — v2
"""Content-level validation and cleanup of uploaded label photos.

The transport layer has already written the upload to a temporary file.
This module decides whether the file is acceptable and makes sure the
temporary file is removed however the request ends.
"""

from __future__ import annotations

import logging
import mimetypes
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterator

from nutriguard.config.settings import Settings
from nutriguard.core.errors import ErrorCode, ValidationError
from nutriguard.core.models import UploadedFile
from nutriguard.llm.models import ImageInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadLimits:
    """Allow-lists and size cap for label photos."""

    allowed_extensions: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".webp", ".heic", ".heif")
    allowed_mime_types: tuple[str, ...] = (
        "image/jpeg", "image/png", "image/webp", "image/heic", "image/heif",
    )
    max_size_bytes: int = 10 * 1024 * 1024

    @classmethod
    def from_settings(cls, settings: Settings) -> UploadLimits:
        return cls(
            allowed_extensions=tuple(settings.allowed_extensions_list),
            allowed_mime_types=tuple(settings.allowed_mime_types_list),
            max_size_bytes=settings.upload_max_size_bytes,
        )


def validate_upload(upload: UploadedFile | None, limits: UploadLimits) -> str:
    """Check name, extension, MIME type and declared size.

    Returns:
        The resolved MIME type (from the extension, else the declared one).

    Raises:
        ValidationError: With the code of the first failed check.
    """
    if upload is None:
        raise ValidationError(ErrorCode.NO_FILE, "No file provided")

    name = upload.original_name or ""
    if not name.strip() or ".." in name or "/" in name or "\\" in name or "\x00" in name:
        raise ValidationError(ErrorCode.INVALID_FILENAME, "Invalid filename")

    ext = PurePath(name).suffix.lower()
    if ext not in limits.allowed_extensions:
        raise ValidationError(
            ErrorCode.INVALID_EXTENSION,
            f"Invalid file extension '{ext}'. Allowed: {', '.join(limits.allowed_extensions)}",
        )

    mime_type = (mimetypes.guess_type(name)[0] or upload.mime_type or "").lower()
    if mime_type not in limits.allowed_mime_types:
        raise ValidationError(
            ErrorCode.INVALID_MIME_TYPE,
            f"Invalid MIME type '{mime_type}'. Allowed: {', '.join(limits.allowed_mime_types)}",
        )

    if upload.size is not None:
        _check_size(upload.size, limits)
    return mime_type


def read_upload(upload: UploadedFile | None, limits: UploadLimits) -> ImageInput:
    """Validate an upload and load its bytes.

    The size check is repeated against the bytes actually on disk, since the
    declared size comes from the client.
    """
    if upload is None:
        raise ValidationError(ErrorCode.NO_FILE, "No file provided")
    mime_type = validate_upload(upload, limits)

    try:
        actual_size = upload.path.stat().st_size
    except FileNotFoundError as exc:
        raise ValidationError(ErrorCode.NO_FILE, "Uploaded file is missing") from exc
    _check_size(actual_size, limits)
    if actual_size == 0:
        raise ValidationError(ErrorCode.EMPTY_FILE, "Uploaded file is empty")

    return ImageInput(
        data=upload.path.read_bytes(),
        media_type=mime_type,
        source_id=upload.original_name,
    )


def remove_upload(upload: UploadedFile | None) -> None:
    """Best-effort removal of the temporary upload file."""
    if upload is None:
        return
    try:
        Path(upload.path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not delete upload %s: %s", upload.path, e)


@contextmanager
def consume_upload(upload: UploadedFile | None) -> Iterator[UploadedFile | None]:
    """Yield the upload and delete its file on every exit path."""
    try:
        yield upload
    finally:
        remove_upload(upload)
        logger.debug("Upload cleanup completed")


def _check_size(size: int, limits: UploadLimits) -> None:
    if size > limits.max_size_bytes:
        raise ValidationError(
            ErrorCode.FILE_TOO_LARGE,
            f"File size {size / 1024 / 1024:.2f}MB exceeds limit of "
            f"{limits.max_size_bytes / 1024 / 1024:g}MB",
        )
