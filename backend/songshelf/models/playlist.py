"""Playlist model"""
from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.sql import func
from datetime import datetime
import uuid

from songshelf.database import Base


class Playlist(Base):
    """Playlist model: an ordered list of song ids"""

    __tablename__ = "playlists"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)
    song_ids = Column(JSON, nullable=False, default=list)  # Ordered song UUIDs
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Playlist(id={self.id}, name='{self.name}', songs={len(self.song_ids or [])})>"
