"""Song service: upload ingestion and song CRUD"""
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Dict, Any, List, Optional
import logging
import uuid

from songshelf.config import settings
from songshelf.errors import ValidationError, NotFoundError, InternalServerError
from songshelf.models.song import Song
from songshelf.repositories import SongRepository
from songshelf.utils.cover_store import CoverArtStore
from songshelf.utils.metadata_extractor import MetadataExtractor, AudioMetadata

logger = logging.getLogger(__name__)

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# Fields a client may change through update_song
UPDATABLE_FIELDS = ('title', 'artist', 'album', 'lyrics', 'album_description')
REQUIRED_FIELDS = ('title', 'artist', 'album')

SORTABLE_FIELDS = {
    'title': Song.title,
    'artist': Song.artist,
    'album': Song.album,
    'duration': Song.duration,
    'created_at': Song.created_at,
}

CHUNK_SIZE = 1024 * 1024


class SongService:
    """Service for song-related operations"""

    def __init__(self, db: Session, extractor: MetadataExtractor = None, cover_store: CoverArtStore = None):
        """
        Initialize song service

        Args:
            db: Database session
            extractor: Metadata extractor (defaults to the mutagen-backed one)
            cover_store: Where embedded cover art is written
        """
        self.db = db
        self.songs = SongRepository(db)
        self.extractor = extractor or MetadataExtractor()
        self.cover_store = cover_store or CoverArtStore()

    @staticmethod
    def is_valid_audio_file(file_name: str) -> bool:
        """Check a file name against the audio extension allow-list"""
        return Path(file_name).suffix.lower() in settings.allowed_extensions_list

    def upload_song(self, file_name: Optional[str], stream: Optional[BinaryIO]) -> Song:
        """
        Store an uploaded audio file, extract its metadata and persist a Song

        Extraction problems never fail the upload: missing or unreadable tags
        fall back to the file name, "Unknown Artist"/"Unknown Album" and a
        zero duration.

        Args:
            file_name: Original name of the uploaded file
            stream: Readable binary stream with the file contents

        Returns:
            The created Song

        Raises:
            ValidationError: no file, disallowed extension, or file too large
            InternalServerError: the record could not be persisted
        """
        if not file_name or stream is None:
            raise ValidationError("No audio file provided")

        if not self.is_valid_audio_file(file_name):
            raise ValidationError("Invalid audio file format")

        stored_path = self._store_audio(stream, Path(file_name).suffix.lower())

        try:
            metadata = self.extractor.extract(stored_path)
        except Exception as e:
            logger.warning(f"Metadata extraction failed for {file_name}, using defaults: {e}")
            metadata = AudioMetadata()

        album_cover = None
        if metadata.cover:
            try:
                album_cover = self.cover_store.save(metadata.cover)
            except OSError as e:
                logger.error(f"Could not save cover art for {file_name}: {e}")

        now = datetime.utcnow()
        song = Song(
            id=str(uuid.uuid4()),
            title=metadata.title or file_name,
            artist=metadata.artist or UNKNOWN_ARTIST,
            album=metadata.album or UNKNOWN_ALBUM,
            duration=max(0, int(metadata.duration or 0)),
            file_path=f"{settings.upload_url_prefix}/audio/{stored_path.name}",
            album_cover=album_cover,
            release_date=str(metadata.year) if metadata.year else None,
            album_description='',
            lyrics='',
            created_at=now,
            updated_at=now,
        )

        try:
            self.songs.create(song)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to persist song for {file_name}: {e}")
            raise InternalServerError("Failed to upload song") from e

        logger.info(f"Uploaded song {song.id}: {song.artist} - {song.title} ({song.duration}s)")
        return song

    def _store_audio(self, stream: BinaryIO, extension: str) -> Path:
        """
        Copy the upload stream to the audio directory, enforcing the size ceiling

        Returns:
            Path of the stored file
        """
        audio_dir = settings.audio_dir
        audio_dir.mkdir(parents=True, exist_ok=True)
        target = audio_dir / f"{uuid.uuid4()}{extension}"

        written = 0
        too_large = False
        with open(target, 'wb') as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.max_upload_size:
                    too_large = True
                    break
                out.write(chunk)

        if too_large:
            target.unlink(missing_ok=True)
            raise ValidationError("File too large")

        return target

    def get_all_songs(self) -> List[Song]:
        """All songs, newest first"""
        return self.songs.list_all()

    def get_song_by_id(self, song_id: str) -> Song:
        """
        Get song by ID

        Raises:
            NotFoundError: if no song has this id
        """
        song = self.songs.get(song_id)
        if not song:
            raise NotFoundError("Song")
        return song

    def search_songs(
        self,
        query: Optional[str] = None,
        artist: Optional[str] = None,
        album: Optional[str] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc',
    ) -> List[Song]:
        """
        Filter and sort the library

        Args:
            query: Case-insensitive substring matched against title, artist or album
            artist: Exact artist match
            album: Exact album (genre) match
            sort_by: One of title, artist, album, duration, created_at
            sort_order: "asc" or "desc"

        Returns:
            Matching songs
        """
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort_by}'")
        if sort_order not in ('asc', 'desc'):
            raise ValidationError("sortOrder must be 'asc' or 'desc'")

        q = self.db.query(Song)
        if query:
            pattern = f"%{query}%"
            q = q.filter(
                (Song.title.ilike(pattern)) |
                (Song.artist.ilike(pattern)) |
                (Song.album.ilike(pattern))
            )
        if artist:
            q = q.filter(Song.artist == artist)
        if album:
            q = q.filter(Song.album == album)

        column = SORTABLE_FIELDS[sort_by]
        if sort_by in ('title', 'artist', 'album'):
            column = func.lower(column)
        q = q.order_by(column.asc() if sort_order == 'asc' else column.desc())
        return q.all()

    def list_artists(self) -> List[str]:
        rows = self.db.query(Song.artist).distinct().order_by(Song.artist).all()
        return [row[0] for row in rows]

    def list_albums(self) -> List[str]:
        rows = self.db.query(Song.album).distinct().order_by(Song.album).all()
        return [row[0] for row in rows]

    def update_song(self, song_id: str, changes: Dict[str, Any]) -> Song:
        """
        Apply a partial update; only title/artist/album/lyrics/album_description are honored

        Args:
            song_id: Song UUID
            changes: Field -> new value. Unknown fields are ignored, absent
                keys are unchanged and None clears lyrics or album_description.

        Returns:
            Updated Song

        Raises:
            ValidationError: None given for title, artist or album
        """
        song = self.get_song_by_id(song_id)

        fields = [field for field in UPDATABLE_FIELDS if field in changes]
        for field in fields:
            if changes[field] is None and field in REQUIRED_FIELDS:
                raise ValidationError(f"Song {field} cannot be null")

        for field in fields:
            setattr(song, field, changes[field])
        song.updated_at = datetime.utcnow()

        try:
            self.songs.update(song)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError("Failed to update song") from e

        logger.info(f"Updated song {song.id}")
        return song

    def delete_song(self, song_id: str):
        """
        Delete a song together with its audio and cover files

        Files that are already gone are tolerated; any other filesystem error
        aborts the delete and the record is kept.
        """
        song = self.get_song_by_id(song_id)

        for url_path in (song.file_path, song.album_cover):
            if not url_path:
                continue
            path = settings.resolve_upload_path(url_path)
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Could not remove {path} for song {song_id}: {e}")
                raise InternalServerError("Failed to delete song") from e

        try:
            self.songs.delete(song)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError("Failed to delete song") from e

        logger.info(f"Deleted song {song_id}")
