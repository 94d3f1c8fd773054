"""Upload-then-link protocol for image fields.

An image is uploaded under a random name and its public URL is handed to the
caller inside a ``with`` block. If the block raises (the field write failed),
the uploaded object is removed again so the bucket never holds an image that
no record points at.
"""

from contextlib import contextmanager
from pathlib import PurePath
from typing import Iterator, Optional
from uuid import uuid4

from .errors import UploadError
from .logging_config import get_logger

logger = get_logger("uploads")

UPLOAD_PREFIX = "public"


def storage_path(filename: str) -> str:
    """Random object path that keeps the original file extension."""
    ext = PurePath(filename or "").suffix.lstrip(".").lower()
    name = uuid4().hex
    return f"{UPLOAD_PREFIX}/{name}.{ext}" if ext else f"{UPLOAD_PREFIX}/{name}"


@contextmanager
def uploaded_image(gateway, filename: str, data: bytes, content_type: Optional[str] = None) -> Iterator[str]:
    if not data:
        raise ValueError(f"{filename or 'upload'} is empty")
    path = storage_path(filename)
    url = gateway.upload(path, data, content_type)
    logger.info("Uploaded %s (%d bytes)", path, len(data))
    try:
        yield url
    except Exception:
        try:
            gateway.remove(path)
        except UploadError:
            logger.exception("Could not remove orphaned upload %s", path)
        raise
