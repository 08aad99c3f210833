import logging
import re
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import get_settings
from app.errors import BuildValidationError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"
ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|svg")


def upload_dir() -> Path:
    return Path(get_settings().UPLOAD_DIR)


def _reject(message: str):
    raise BuildValidationError([{"field": "image", "message": message}], message)


async def save_image(upload: UploadFile) -> str:
    """Store an uploaded image and return its public path."""
    settings = get_settings()
    extension = Path(upload.filename or "").suffix.lower()
    content_type = upload.content_type or ""
    is_image = content_type.startswith("image/") and ALLOWED_TYPES.search(content_type)
    if not (is_image and ALLOWED_TYPES.search(extension)):
        _reject("Only image files are allowed!")

    data = await upload.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        _reject(f"Image exceeds the {limit_mb}MB limit")

    directory = upload_dir()
    directory.mkdir(parents=True, exist_ok=True)
    filename = f"image-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
    (directory / filename).write_bytes(data)
    logger.info("Saved upload %s (%d bytes)", filename, len(data))
    return UPLOAD_URL_PREFIX + filename


def delete_image(img_url: str | None) -> bool:
    """Remove a previously uploaded image. External URLs are left alone."""
    if not img_url or not img_url.startswith(UPLOAD_URL_PREFIX):
        return False
    path = upload_dir() / Path(img_url).name
    if not path.exists():
        return False
    path.unlink()
    logger.info("Deleted upload %s", path.name)
    return True
