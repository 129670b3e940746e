"""Songs API endpoints"""
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import Field
import logging

from songshelf.api.common import CamelModel, SongResponse, MessageResponse
from songshelf.database import get_db
from songshelf.security import get_current_user_id
from songshelf.services.song_service import SongService

router = APIRouter(prefix="/api/songs", tags=["songs"])
logger = logging.getLogger(__name__)


class SongUpdateRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    artist: str | None = Field(None, min_length=1, max_length=255)
    album: str | None = Field(None, min_length=1, max_length=255)
    lyrics: str | None = None
    album_description: str | None = None


@router.get("", response_model=List[SongResponse])
def list_songs(
    q: Optional[str] = Query(None, description="Search title, artist or album"),
    artist: Optional[str] = None,
    album: Optional[str] = None,
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    """List songs, optionally filtered and sorted"""
    return SongService(db).search_songs(q, artist, album, sort_by, sort_order)


@router.get("/artists", response_model=List[str])
def list_artists(db: Session = Depends(get_db)):
    """Distinct artists in the library"""
    return SongService(db).list_artists()


@router.get("/albums", response_model=List[str])
def list_album_names(db: Session = Depends(get_db)):
    """Distinct album (genre) names in the library"""
    return SongService(db).list_albums()


@router.get("/{song_id}", response_model=SongResponse)
def get_song(song_id: str, db: Session = Depends(get_db)):
    """Get a single song"""
    return SongService(db).get_song_by_id(song_id)


@router.post("/upload", response_model=SongResponse, status_code=status.HTTP_201_CREATED)
def upload_song(
    audio: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Upload an audio file (multipart field "audio")"""
    service = SongService(db)
    if audio is None:
        return service.upload_song(None, None)

    try:
        logger.info(f"User {user_id} uploading {audio.filename}")
        return service.upload_song(audio.filename, audio.file)
    finally:
        audio.file.close()


@router.patch("/{song_id}", response_model=SongResponse)
def update_song(
    song_id: str,
    request: SongUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Edit title, artist, album, lyrics or description"""
    return SongService(db).update_song(song_id, request.model_dump(exclude_unset=True))


@router.delete("/{song_id}", response_model=MessageResponse)
def delete_song(
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a song and its files"""
    SongService(db).delete_song(song_id)
    return {"message": "Song deleted successfully"}
