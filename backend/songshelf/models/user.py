"""User model"""
from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.sql import func
from datetime import datetime
import uuid

from songshelf.database import Base


class User(Base):
    """User account; favorites are kept as a list of song ids"""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    favorite_song_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
