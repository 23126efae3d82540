"""Profile image uploads.

Users and players may carry an optional profile picture. Images are written
to `UPLOAD_DIR` under a collision-free name and the owning record stores the
public path (`/uploads/<name>`), which `main.py` serves as static files.

Only common raster formats are accepted and the payload is capped at
`MAX_UPLOAD_BYTES` (5 MiB by default). Rejections raise `UploadRejected`
before anything touches disk.
"""

import logging
import os
import random
import time

from fastapi import UploadFile

from .errors import UploadRejected
from .settings import get_settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
PUBLIC_PREFIX = "/uploads"


def _unique_name(ext: str) -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


def save_image(upload: UploadFile | None) -> str | None:
    """Validate and persist an uploaded image.

    Args:
        upload: The multipart file, or None when the client sent no file.

    Returns:
        str | None: Public path of the stored image, or None if nothing was uploaded.

    Raises:
        UploadRejected: 415 for a non-image type/extension, 413 when over the size limit.
    """
    if upload is None or not upload.filename:
        return None

    settings = get_settings()
    ext = os.path.splitext(upload.filename)[1].lower()
    content_type = (upload.content_type or "").lower()
    if ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadRejected("Only image files are allowed (jpeg, jpg, png, gif)", status_code=415)

    # read one byte past the limit so oversize files are detected without buffering them whole
    data = upload.file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise UploadRejected(
            f"Image exceeds {settings.max_upload_bytes} bytes",
            status_code=413,
        )

    os.makedirs(settings.upload_dir, exist_ok=True)
    filename = _unique_name(ext)
    with open(os.path.join(settings.upload_dir, filename), "wb") as f:
        f.write(data)

    logger.info("Stored upload %s (%d bytes)", filename, len(data))
    return f"{PUBLIC_PREFIX}/{filename}"


def discard_image(public_path: str | None) -> None:
    """Remove a stored image that ended up unreferenced (e.g. the insert that
    would have owned it failed)."""
    if not public_path or not public_path.startswith(PUBLIC_PREFIX + "/"):
        return
    path = os.path.join(get_settings().upload_dir, os.path.basename(public_path))
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
