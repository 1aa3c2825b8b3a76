from __future__ import annotations
import logging
import os
import time
from typing import BinaryIO

from tenders_map.core.config import settings
from tenders_map.utils.strings import safe_filename

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

CHUNK_SIZE = 1024 * 1024

# content type -> accepted extensions, first one is what gets written to disk
ALLOWED_TYPES = {
    "image/png": (".png",),
    "image/jpeg": (".jpg", ".jpeg"),
    "image/jpg": (".jpg", ".jpeg"),
    "image/webp": (".webp",),
    "image/gif": (".gif",),
    "image/heic": (".heic",),
}


class UploadRejected(ValueError):
    pass


def ensure_uploads_dir() -> str:
    os.makedirs(settings.uploads_dir, exist_ok=True)
    return settings.uploads_dir


def stored_name(original_name: str | None, content_type: str | None) -> str:
    """
    Build the on-disk name from the client's name and declared type.
    The extension always comes from the content type, so the static file
    server can only ever hand the file back as an image.
    """
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    if ctype not in ALLOWED_TYPES:
        raise UploadRejected(f"Unsupported file type: {content_type}")
    extensions = ALLOWED_TYPES[ctype]

    stem, ext = os.path.splitext(safe_filename(original_name))
    if ext and ext.lower() not in extensions:
        raise UploadRejected(f"File extension {ext} does not match {ctype}")
    return f"{stem or 'upload'}{extensions[0]}"


def read_limited(fh: BinaryIO, max_bytes: int) -> bytes:
    """Read at most max_bytes, raising as soon as the stream goes past it."""
    parts = []
    total = 0
    while True:
        chunk = fh.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise UploadRejected(f"File larger than {settings.max_upload_mb} MB")
        parts.append(chunk)
    if not total:
        raise UploadRejected("Empty file")
    return b"".join(parts)


def save_upload(blob: bytes, name: str) -> str:
    """Write the file and return its public URL (/uploads/<millis>-<name>)."""
    folder = ensure_uploads_dir()
    fname = f"{int(time.time() * 1000)}-{name}"
    with open(os.path.join(folder, fname), "wb") as fh:
        fh.write(blob)
    return f"{URL_PREFIX}/{fname}"


def remove_upload(url: str) -> None:
    if not url.startswith(URL_PREFIX + "/"):
        return
    fpath = os.path.join(settings.uploads_dir, url[len(URL_PREFIX) + 1:])
    try:
        os.remove(fpath)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove uploaded file %s", fpath, exc_info=True)
