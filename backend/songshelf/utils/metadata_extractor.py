"""Audio metadata extraction utilities"""
import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Any, Union
import logging

import mutagen
from mutagen.flac import Picture
from mutagen.id3 import ID3

logger = logging.getLogger(__name__)

# Easy-tag key -> equivalent ID3 frame, for formats (WAV, AIFF) whose tags
# come back as raw ID3 even when easy mode is requested
ID3_FRAMES = {
    'title': 'TIT2',
    'artist': 'TPE1',
    'album': 'TALB',
    'date': 'TDRC',
    'genre': 'TCON',
    'tracknumber': 'TRCK',
    'discnumber': 'TPOS',
}


class ExtractionError(Exception):
    """Raised when a file cannot be parsed as audio"""


@dataclass
class AudioMetadata:
    """Best-effort tag data for one audio file. Absent tags stay None."""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: int = 0  # Whole seconds
    year: Optional[int] = None
    genre: Optional[str] = None
    track_number: Optional[int] = None
    disc_number: Optional[int] = None
    cover: Optional[bytes] = None


def _parse_number(value: Optional[str]) -> Optional[int]:
    """Parse "3" or "3/12" style numbers"""
    if not value:
        return None
    try:
        return int(str(value).split('/')[0].strip())
    except (ValueError, TypeError):
        return None


def _parse_year(value: Optional[str]) -> Optional[int]:
    """Parse a year out of "2014" or a full "2014-05-01" date"""
    if not value:
        return None
    year = str(value).strip()
    if len(year) > 4:
        year = year[:4]
    try:
        return int(year)
    except (ValueError, TypeError):
        return None


class MetadataExtractor:
    """Extract tags, duration and embedded cover art from audio files"""

    def extract(self, file_path: Union[str, Path]) -> AudioMetadata:
        """
        Extract metadata from a single audio file

        Args:
            file_path: Path to the audio file

        Returns:
            AudioMetadata with whatever the file carries

        Raises:
            ExtractionError: if the file is not a readable audio file
        """
        try:
            audio = mutagen.File(str(file_path), easy=True)
        except Exception as e:
            raise ExtractionError(f"Could not parse {file_path}: {e}") from e

        if audio is None:
            raise ExtractionError(f"Unrecognized audio format: {file_path}")

        tags = audio.tags
        metadata = AudioMetadata(
            title=self._tag(tags, 'title'),
            artist=self._tag(tags, 'artist'),
            album=self._tag(tags, 'album'),
            year=_parse_year(self._tag(tags, 'date')),
            genre=self._tag(tags, 'genre'),
            track_number=_parse_number(self._tag(tags, 'tracknumber')),
            disc_number=_parse_number(self._tag(tags, 'discnumber')),
        )

        length = getattr(audio.info, 'length', None) if audio.info else None
        if length:
            # Halves round up
            metadata.duration = max(0, int(length + 0.5))

        metadata.cover = self.extract_cover(file_path)
        return metadata

    def extract_cover(self, file_path: Union[str, Path]) -> Optional[bytes]:
        """
        Extract the first embedded picture from an audio file

        Args:
            file_path: Path to the audio file

        Returns:
            Raw image bytes, or None if the file carries no picture
        """
        try:
            audio = mutagen.File(str(file_path))
            if audio is None:
                return None

            # FLAC
            pictures = getattr(audio, 'pictures', None)
            if pictures:
                return pictures[0].data

            tags = audio.tags
            if tags is None:
                return None

            # MP3 / WAV / AIFF (ID3 APIC frames)
            if isinstance(tags, ID3):
                frames = tags.getall('APIC')
                return frames[0].data if frames else None

            # M4A / AAC in MP4 container
            covers = tags.get('covr') if hasattr(tags, 'get') else None
            if covers:
                return bytes(covers[0])

            # Ogg Vorbis / Opus
            blocks = tags.get('metadata_block_picture') if hasattr(tags, 'get') else None
            if blocks:
                return Picture(base64.b64decode(blocks[0])).data
        except Exception as e:
            logger.warning(f"Could not extract embedded cover art from {file_path}: {e}")

        return None

    @staticmethod
    def _tag(tags: Any, key: str) -> Optional[str]:
        """First non-empty value of an easy tag key, if present"""
        if tags is None:
            return None

        values = None
        if isinstance(tags, ID3):
            frame = tags.get(ID3_FRAMES[key])
            values = frame.text if frame is not None else None
        else:
            try:
                values = tags.get(key)
            except (KeyError, ValueError):
                values = None

        if not values:
            return None
        if isinstance(values, (list, tuple)):
            values = values[0] if values else None
        value = str(values).strip() if values is not None else ''
        return value or None
