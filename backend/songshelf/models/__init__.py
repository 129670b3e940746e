"""Database models"""
from songshelf.models.song import Song
from songshelf.models.playlist import Playlist
from songshelf.models.album import Album
from songshelf.models.user import User

__all__ = [
    "Song",
    "Playlist",
    "Album",
    "User",
]
