"""Cover art persistence"""
from pathlib import Path
from typing import Optional, Union
import io
import logging
import uuid

from PIL import Image, UnidentifiedImageError

from songshelf.config import settings

logger = logging.getLogger(__name__)

# Pillow format name -> file extension
IMAGE_EXTENSIONS = {
    'JPEG': '.jpg',
    'PNG': '.png',
    'GIF': '.gif',
    'WEBP': '.webp',
    'BMP': '.bmp',
}


class CoverArtStore:
    """Write raw cover images under generated names and hand back their retrieval path"""

    def __init__(self, covers_dir: Union[str, Path] = None, url_prefix: str = None):
        """
        Initialize cover store

        Args:
            covers_dir: Directory for cover files (defaults to settings)
            url_prefix: Retrieval prefix for stored covers (defaults to settings)
        """
        self.covers_dir = Path(covers_dir or settings.covers_dir)
        self.url_prefix = url_prefix or f"{settings.upload_url_prefix}/covers"

    def save(self, data: bytes, file_name: Optional[str] = None) -> str:
        """
        Persist an image buffer

        Args:
            data: Raw image bytes
            file_name: Name to use (defaults to a fresh UUID with a sniffed extension)

        Returns:
            Retrieval path, e.g. "/uploads/covers/<uuid>.jpg"
        """
        if file_name is None:
            file_name = f"{uuid.uuid4()}{self.guess_extension(data)}"

        self.covers_dir.mkdir(parents=True, exist_ok=True)
        cover_path = self.covers_dir / file_name
        with open(cover_path, 'wb') as f:
            f.write(data)

        logger.info(f"Saved cover art {cover_path} ({len(data)} bytes)")
        return f"{self.url_prefix}/{file_name}"

    @staticmethod
    def guess_extension(data: bytes) -> str:
        """File extension matching the image format; ".jpg" when it cannot be identified"""
        try:
            with Image.open(io.BytesIO(data)) as img:
                return IMAGE_EXTENSIONS.get(img.format, '.jpg')
        except (UnidentifiedImageError, OSError, ValueError):
            return '.jpg'
