# Overview: Bank transfer slip checks and storage on local disk.

from __future__ import annotations

import os
import uuid

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..errors import UploadError


def _slip_size(slip: FileStorage) -> int:
    stream = slip.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def check_slip(slip: FileStorage | None, *, max_bytes: int, allowed_types) -> int:
    """
    Validate an uploaded slip and return its size in bytes.

    Raises UploadError when the slip is missing, empty, too large, or not a
    JPG/PNG/PDF.
    """
    if slip is None or not slip.filename:
        raise UploadError("Bank transfer slip is required")

    if slip.mimetype not in allowed_types:
        raise UploadError("Invalid file type. Only JPG, PNG, and PDF files are allowed.")

    size = _slip_size(slip)
    if size == 0:
        raise UploadError("Bank transfer slip is empty")
    if size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise UploadError(f"File too large. Maximum size is {limit_mb}MB.")
    return size


def store_slip(slip: FileStorage, directory: str) -> str:
    """Write the slip under a generated name and return that name."""
    os.makedirs(directory, exist_ok=True)
    _, ext = os.path.splitext(secure_filename(slip.filename or ""))
    filename = f"{uuid.uuid4().hex}{ext.lower()}"
    slip.stream.seek(0)
    slip.save(os.path.join(directory, filename))
    return filename


def discard_slip(directory: str, filename: str) -> None:
    path = os.path.join(directory, filename)
    if os.path.exists(path):
        os.remove(path)
