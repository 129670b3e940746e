"""Thin CRUD repositories over the ORM models"""
from sqlalchemy.orm import Session
from typing import Generic, List, Optional, Type, TypeVar

from songshelf.models.album import Album
from songshelf.models.playlist import Playlist
from songshelf.models.song import Song
from songshelf.models.user import User

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """Create/read/update/delete for one record kind. Each write is a single commit."""

    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def create(self, instance: ModelT) -> ModelT:
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def get(self, record_id: str) -> Optional[ModelT]:
        return self.db.query(self.model).filter(self.model.id == record_id).first()

    def list_all(self) -> List[ModelT]:
        """All records, newest first"""
        return self.db.query(self.model).order_by(self.model.created_at.desc()).all()

    def get_many(self, record_ids: List[str]) -> List[ModelT]:
        if not record_ids:
            return []
        return self.db.query(self.model).filter(self.model.id.in_(record_ids)).all()

    def update(self, instance: ModelT) -> ModelT:
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def delete(self, instance: ModelT):
        self.db.delete(instance)
        self.db.commit()


class SongRepository(Repository[Song]):
    model = Song


class PlaylistRepository(Repository[Playlist]):
    model = Playlist


class AlbumRepository(Repository[Album]):
    model = Album


class UserRepository(Repository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()
