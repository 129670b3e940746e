"""Response/request model helpers shared by the routers"""
from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes as camelCase, accepts camelCase or snake_case input"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SongResponse(CamelModel):
    id: str
    title: str
    artist: str
    album: str
    duration: int
    file_path: str
    album_cover: str | None = None
    release_date: str | None = None
    album_description: str | None = None
    lyrics: str | None = None
    created_at: datetime
    updated_at: datetime


class PlaylistResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    cover_image: str | None = None
    song_ids: List[str]
    created_at: datetime
    updated_at: datetime


class AlbumResponse(PlaylistResponse):
    artist: str
    release_date: str | None = None


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    favorite_song_ids: List[str] = []


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


class MessageResponse(CamelModel):
    message: str
