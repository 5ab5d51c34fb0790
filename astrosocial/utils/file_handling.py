import logging
from pathlib import Path

import anyio
from fastapi import UploadFile, status

from astrosocial.core.config import settings
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import INVALID_FILE_TYPE, FILE_TOO_LARGE, FILE_UPLOAD_ERROR
from astrosocial.utils.date import get_date

logger = logging.getLogger(__name__)

AVATAR_ALLOWED_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif"
}

AVATAR_DIR = "avatars"


def _write_file(path: Path, contents: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(contents)


async def save_avatar(file: UploadFile, user_id: int) -> str:
    """Validate an uploaded image and store it under MEDIA_ROOT; returns its public URL"""
    mime_type = (file.content_type or "").split(";")[0].strip().lower()
    if mime_type not in AVATAR_ALLOWED_MIME_TYPES:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {', '.join(AVATAR_ALLOWED_MIME_TYPES.keys())} files allowed",
            error_code=INVALID_FILE_TYPE
        )

    # Read one byte past the limit so oversized uploads are detected without loading them whole
    contents = await file.read(settings.MAX_AVATAR_SIZE + 1)
    if len(contents) > settings.MAX_AVATAR_SIZE:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Max size: {settings.MAX_AVATAR_SIZE // (1024 * 1024)}MB",
            error_code=FILE_TOO_LARGE
        )
    if not contents:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
            error_code=INVALID_FILE_TYPE
        )

    filename = f"avatar_{get_date()}.{AVATAR_ALLOWED_MIME_TYPES[mime_type]}"
    relative_path = f"{AVATAR_DIR}/{user_id}/{filename}"

    try:
        await anyio.to_thread.run_sync(_write_file, Path(settings.MEDIA_ROOT) / relative_path, contents)
    except OSError as e:
        logger.error(f"Avatar upload failed for user {user_id}: {str(e)}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store avatar",
            error_code=FILE_UPLOAD_ERROR
        )

    return f"{settings.MEDIA_URL.rstrip('/')}/{relative_path}"


async def delete_avatar(url: str) -> bool:
    """Delete a stored avatar by its public URL; URLs not under MEDIA_URL are left alone"""
    prefix = f"{settings.MEDIA_URL.rstrip('/')}/{AVATAR_DIR}/"
    if not url or not url.startswith(prefix):
        return False

    avatar_root = (Path(settings.MEDIA_ROOT) / AVATAR_DIR).resolve()
    path = (Path(settings.MEDIA_ROOT) / url[len(settings.MEDIA_URL.rstrip('/')) + 1:]).resolve()
    # avatar_url is user-editable, never follow it outside the avatar directory
    if avatar_root not in path.parents:
        logger.warning(f"Refusing to delete file outside avatar storage: {url}")
        return False

    try:
        await anyio.to_thread.run_sync(path.unlink)
    except FileNotFoundError:
        logger.warning(f"Avatar not found: {path}")
        return False
    except OSError as e:
        logger.error(f"Avatar deletion failed: {str(e)}")
        return False

    logger.info(f"Deleted avatar: {path}")
    return True
