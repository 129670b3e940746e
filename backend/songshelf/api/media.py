"""Media serving endpoints for uploaded audio and cover art"""
from fastapi import APIRouter
from fastapi.responses import FileResponse
from pathlib import Path
import logging

from songshelf.config import settings
from songshelf.errors import AuthorizationError, NotFoundError

router = APIRouter(prefix=settings.upload_url_prefix, tags=["media"])
logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
    '.flac': 'audio/flac',
    '.m4a': 'audio/mp4',
    '.aac': 'audio/aac',
    '.ogg': 'audio/ogg',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
}


@router.get("/{file_path:path}")
def serve_media_file(file_path: str):
    """
    Serve an uploaded audio file or cover image

    Args:
        file_path: Path relative to the upload directory, e.g. "covers/<uuid>.jpg"
    """
    upload_path = Path(settings.upload_dir).resolve()
    full_path = (upload_path / file_path).resolve()

    # Security: Ensure the resolved path is within the upload directory
    if not full_path.is_relative_to(upload_path):
        logger.warning(f"Rejected media path outside upload dir: {file_path}")
        raise AuthorizationError("Access denied")

    if not full_path.exists() or not full_path.is_file():
        logger.warning(f"Media file not found: {full_path}")
        raise NotFoundError("Media file")

    media_type = MEDIA_TYPES.get(full_path.suffix.lower(), 'application/octet-stream')

    return FileResponse(
        path=str(full_path),
        media_type=media_type,
        filename=full_path.name
    )
