"""Shared logic for song collections (playlists and albums)"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Dict, Any, Tuple
import logging
import uuid

from songshelf.errors import ValidationError, NotFoundError, InternalServerError
from songshelf.repositories import Repository, SongRepository

logger = logging.getLogger(__name__)


class CollectionService:
    """
    CRUD and membership operations for a record kind holding an ordered song_ids list

    Subclasses set the repository class, the display name used in errors, the
    fields accepted on create/update and the placeholder cover.
    """

    repository_class = Repository
    resource_name = "Collection"
    required_fields: Tuple[str, ...] = ('name',)
    updatable_fields: Tuple[str, ...] = ('name', 'description', 'cover_image', 'song_ids')
    default_cover = "/default-cover.jpg"

    def __init__(self, db: Session):
        """
        Initialize collection service

        Args:
            db: Database session
        """
        self.db = db
        self.repository = self.repository_class(db)
        self.songs = SongRepository(db)

    def create(self, data: Dict[str, Any]):
        """
        Create a new collection

        Args:
            data: Field values; song_ids defaults to an empty list

        Returns:
            Created instance
        """
        for field in self.required_fields:
            value = data.get(field)
            if value is None or not str(value).strip():
                raise ValidationError(f"{self.resource_name} {field} is required")

        now = datetime.utcnow()
        values = {field: data.get(field) for field in self.updatable_fields}
        values['song_ids'] = list(data.get('song_ids') or [])
        instance = self.repository.model(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **values,
        )

        try:
            self.repository.create(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError(f"Failed to create {self.resource_name.lower()}") from e

        logger.info(f"Created {self.resource_name.lower()}: {instance.name} ({instance.id})")
        return instance

    def get_all(self) -> List:
        return self.repository.list_all()

    def get_all_with_covers(self) -> List[Dict[str, Any]]:
        """
        All collections with their effective cover computed

        The cover is the explicit one if set, else the cover of the first
        member song, else the placeholder. It is never written back.
        """
        collections = self.get_all()
        first_ids = [c.song_ids[0] for c in collections if c.song_ids]
        first_songs = {song.id: song for song in self.songs.get_many(first_ids)}

        result = []
        for collection in collections:
            item = {column.name: getattr(collection, column.name) for column in collection.__table__.columns}
            first_song = first_songs.get(collection.song_ids[0]) if collection.song_ids else None
            item['cover_image'] = self.effective_cover(collection, first_song)
            result.append(item)
        return result

    def effective_cover(self, collection, first_song=None) -> str:
        if collection.cover_image:
            return collection.cover_image
        if first_song is not None and first_song.album_cover:
            return first_song.album_cover
        return self.default_cover

    def get_by_id(self, collection_id: str):
        """
        Get collection by ID

        Raises:
            NotFoundError: if the id is unknown
        """
        instance = self.repository.get(collection_id)
        if not instance:
            raise NotFoundError(self.resource_name)
        return instance

    def update(self, collection_id: str, changes: Dict[str, Any]):
        """
        Update a collection; keys absent from changes are unchanged

        An explicit None clears an optional field (e.g. cover_image, which
        brings back the derived cover). Required fields and song_ids cannot
        be cleared.

        Args:
            collection_id: Collection UUID
            changes: Field -> new value

        Returns:
            Updated instance
        """
        instance = self.get_by_id(collection_id)

        fields = [field for field in self.updatable_fields if field in changes]
        for field in fields:
            if changes[field] is None and field in (*self.required_fields, 'song_ids'):
                raise ValidationError(f"{self.resource_name} {field} cannot be null")

        for field in fields:
            value = changes[field]
            if field == 'song_ids':
                value = list(value)
            setattr(instance, field, value)

        return self._save(instance, "update")

    def delete(self, collection_id: str):
        instance = self.get_by_id(collection_id)
        try:
            self.repository.delete(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError(f"Failed to delete {self.resource_name.lower()}") from e
        logger.info(f"Deleted {self.resource_name.lower()}: {collection_id}")

    def add_song(self, collection_id: str, song_id: str):
        """
        Append a song id; a song already in the collection is left where it is

        Returns:
            The collection in its current state
        """
        instance = self.get_by_id(collection_id)
        if song_id in (instance.song_ids or []):
            logger.debug(f"Song {song_id} already in {self.resource_name.lower()} {collection_id}")
            return instance

        # Assign a new list so the JSON column is flagged dirty
        instance.song_ids = [*(instance.song_ids or []), song_id]
        return self._save(instance, "add song to")

    def remove_song(self, collection_id: str, song_id: str):
        """Remove every occurrence of a song id; removing a non-member is a no-op"""
        instance = self.get_by_id(collection_id)
        instance.song_ids = [sid for sid in (instance.song_ids or []) if sid != song_id]
        return self._save(instance, "remove song from")

    def _save(self, instance, action: str):
        instance.updated_at = datetime.utcnow()
        try:
            self.repository.update(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError(f"Failed to {action} {self.resource_name.lower()}") from e
        return instance
