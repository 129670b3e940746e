"""Song model"""
from sqlalchemy import Column, String, Integer, Text, DateTime
from sqlalchemy.sql import func
from datetime import datetime
import uuid

from songshelf.database import Base


class Song(Base):
    """Song model representing one uploaded audio file"""

    __tablename__ = "songs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    artist = Column(String, nullable=False)
    album = Column(String, nullable=False)  # Free text, also used as genre grouping
    duration = Column(Integer, nullable=False, default=0)  # Seconds
    file_path = Column(String, nullable=False)  # Retrieval path: /uploads/audio/<name>
    album_cover = Column(String, nullable=True)  # Retrieval path: /uploads/covers/<name>
    release_date = Column(String, nullable=True)
    album_description = Column(Text, nullable=True)
    lyrics = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Song(id={self.id}, artist='{self.artist}', title='{self.title}')>"
