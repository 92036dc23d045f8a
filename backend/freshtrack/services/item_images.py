"""
Item Images — photos attached to food items, kept on local disk.

Files are written to `<UPLOAD_DIR>/<user_id>/<item_id>-<token><ext>` and
served publicly under `/uploads`. A client may also set `image_url` to any
outside address; only files inside the owner's upload directory are ever
removed.
"""

import logging
import secrets
from pathlib import Path
from uuid import UUID

from freshtrack.config import get_settings

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"

IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def upload_root() -> Path:
    return Path(get_settings().UPLOAD_DIR)


def max_upload_bytes() -> int:
    return get_settings().MAX_UPLOAD_SIZE_MB * 1024 * 1024


def save_item_image(user_id: UUID, item_id: UUID, content: bytes, content_type: str) -> str:
    """Write the image and return the URL to store on the item."""
    ext = IMAGE_TYPES[content_type]
    user_dir = upload_root() / str(user_id)
    user_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{item_id}-{secrets.token_hex(4)}{ext}"
    (user_dir / filename).write_bytes(content)
    logger.info("Stored %d-byte image for item %s", len(content), item_id)
    return f"{UPLOAD_URL_PREFIX}{user_id}/{filename}"


def _owned_path(user_id: UUID, image_url: str | None) -> Path | None:
    """Map an upload URL back to its file, or None if it is not this user's upload."""
    if not image_url or not image_url.startswith(UPLOAD_URL_PREFIX):
        return None
    user_dir = (upload_root() / str(user_id)).resolve()
    path = (upload_root() / image_url[len(UPLOAD_URL_PREFIX):]).resolve()
    if path.parent != user_dir:
        logger.warning("Refusing to touch %s outside the upload directory of user %s", image_url, user_id)
        return None
    return path


def delete_item_image(user_id: UUID, image_url: str | None) -> bool:
    """Remove an uploaded image file. Returns False for foreign URLs or missing files."""
    path = _owned_path(user_id, image_url)
    if path is None or not path.exists():
        return False
    path.unlink()
    logger.info("Deleted image %s", image_url)
    return True
