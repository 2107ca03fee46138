import re
import secrets
import time
from pathlib import Path
from typing import Optional

from .errors import UploadError
from .log import get_logger

logger = get_logger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
DEFAULT_EXT = ".png"
EXT_RE = re.compile(r"\.[a-zA-Z0-9]+$")


def upload_name(filename: Optional[str]) -> str:
    """Random file name that keeps the extension of *filename* (``.png`` if none)."""
    match = EXT_RE.search(filename or "")
    ext = match.group(0).lower() if match else DEFAULT_EXT
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{ext}"


def save_upload(directory: Path, content: bytes, filename: Optional[str] = None) -> str:
    """Store *content* under *directory* and return its public relative URL."""
    if not content:
        raise UploadError("empty upload")
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    name = upload_name(filename)
    (directory / name).write_bytes(content)
    logger.info("Stored upload %s (%d bytes)", name, len(content))
    return f"{UPLOAD_URL_PREFIX}/{name}"
