import re
import time
from pathlib import Path, PurePath

import aiofiles
from fastapi import Depends, File, HTTPException, UploadFile

from app.constants import ALLOWED_MEDIA_TYPES
from app.core.config import Settings, get_settings
from app.core.logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


def build_stored_filename(original_name: str, now_ms: int | None = None) -> str:
    """Collision-resistant name: ``<epoch-millis>-<base>.<ext>``.

    Directory components are dropped and whitespace runs in the base name
    become underscores.
    """
    original = PurePath(original_name.replace("\\", "/")).name
    ext = PurePath(original).suffix
    base = original[: -len(ext)] if ext else original
    base = re.sub(r"\s+", "_", base)
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{base}{ext}"


def normalize_path(path: Path) -> str:
    return str(path).replace("\\", "/")


def discard_file(file_path: str | Path) -> None:
    path = Path(file_path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Failed to delete file {path}: {e}")


def public_file_url(base_url: str, file_path: str, settings: Settings) -> str:
    """Map a stored file path to the URL it is served under."""
    root = normalize_path(settings.UPLOAD_ROOT).rstrip("/")
    path = file_path
    if path.startswith(root + "/"):
        path = settings.PUBLIC_UPLOAD_PREFIX.rstrip("/") + path[len(root) :]
    return f"{base_url.rstrip('/')}{path}"


async def store_upload(
    file: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
) -> Path:
    """Validate the uploaded recording and persist it to the upload directory.

    Args:
        file (UploadFile | None): The multipart ``file`` field.
        settings (Settings): Upload directory and size limit.
    Returns:
        Path: Where the file was written.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if file.content_type not in ALLOWED_MEDIA_TYPES:
        logger.warning(f"Rejected upload {file.filename!r} of type {file.content_type}")
        raise HTTPException(
            status_code=400, detail="Only audio and video files are allowed"
        )

    upload_dir = settings.recordings_dir
    upload_dir.mkdir(parents=True, exist_ok=True)
    destination = upload_dir / build_stored_filename(file.filename)

    written = 0
    too_large = False
    async with aiofiles.open(destination, "wb") as out:
        while chunk := await file.read(CHUNK_SIZE):
            written += len(chunk)
            if written > settings.MAX_UPLOAD_BYTES:
                too_large = True
                break
            await out.write(chunk)

    if too_large:
        discard_file(destination)
        logger.warning(f"Rejected upload {file.filename!r}: exceeds {settings.MAX_UPLOAD_BYTES} bytes")
        raise HTTPException(status_code=400, detail="File too large")

    logger.info(f"Stored upload {file.filename!r} as {destination.name} ({written} bytes)")
    return destination
