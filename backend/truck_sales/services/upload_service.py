# Overview: Service-layer image upload; validates files and writes them to object storage.

"""
Image upload proxy.

Each file is checked against ALLOWED_TYPES and MAX_FILE_SIZE. Rejected files
are reported per file and never reach storage. A storage failure aborts the
batch: objects already written by the same request are deleted again, then
the error propagates and the route answers 500.
"""
from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field

from flask import current_app

from ..extensions import storage

MAX_FILE_SIZE = 5 * 1024 * 1024

ALLOWED_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

_EXTENSION_BY_TYPE = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class UploadResult:
    uploaded: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        result = {
            "success": len(self.uploaded) > 0,
            "uploaded_images": self.uploaded,
            "message": f"{len(self.uploaded)} images uploaded successfully",
        }
        if self.errors:
            result["errors"] = self.errors
            result["message"] += f", {len(self.errors)} failed"
        return result


def generate_image_path(filename: str | None, content_type: str) -> str:
    """trucks/<epoch-ms>-<random>.<ext>; extension from the filename, else the MIME type."""
    extension = ""
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1].lower()
    if not extension:
        extension = _EXTENSION_BY_TYPE.get(content_type, "bin")
    return f"trucks/{int(time.time() * 1000)}-{secrets.token_hex(6)}.{extension}"


def validate_file(content_type: str | None, size: int) -> str | None:
    """Return an error message, or None when the file is acceptable."""
    if content_type not in ALLOWED_TYPES:
        return f"Invalid file type. Allowed types: {', '.join(ALLOWED_TYPES)}"
    if size > MAX_FILE_SIZE:
        return f"File too large. Maximum size: {MAX_FILE_SIZE // (1024 * 1024)}MB"
    return None


def _discard_uploaded(uploaded: list[dict]) -> None:
    for image in uploaded:
        try:
            storage.delete(image["path"])
        except Exception:
            current_app.logger.exception("Failed to remove orphaned image %s", image["path"])
        else:
            current_app.logger.warning("Removed image %s after a failed batch", image["path"])


def upload_images(files) -> UploadResult:
    """
    Upload werkzeug FileStorage objects.

    Storage errors are logged with the object key and re-raised after the
    objects already written in this call are removed.
    """
    result = UploadResult()

    for file in files:
        body = file.read()
        error = validate_file(file.mimetype, len(body))
        if error:
            result.errors.append({"filename": file.filename, "error": error})
            continue

        path = generate_image_path(file.filename, file.mimetype)
        try:
            url = storage.put(path, body, file.mimetype)
        except Exception:
            current_app.logger.exception("Failed to store image %s", path)
            _discard_uploaded(result.uploaded)
            raise
        result.uploaded.append({"url": url, "path": path})

    return result
