"""Album model"""
from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.sql import func
from datetime import datetime
import uuid

from songshelf.database import Base


class Album(Base):
    """Album model: a user-curated, ordered list of song ids with artist info"""

    __tablename__ = "albums"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    artist = Column(String, nullable=False)
    cover_image = Column(String, nullable=True)
    release_date = Column(String, nullable=True)
    description = Column(String, nullable=True)
    song_ids = Column(JSON, nullable=False, default=list)  # Ordered song UUIDs
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Album(id={self.id}, artist='{self.artist}', name='{self.name}')>"
