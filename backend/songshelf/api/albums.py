"""Albums API endpoints"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from songshelf.api.common import CamelModel, AlbumResponse
from songshelf.database import get_db
from songshelf.security import get_current_user_id
from songshelf.services.album_service import AlbumService

router = APIRouter(prefix="/api/albums", tags=["albums"])


class AlbumCreateRequest(CamelModel):
    name: str
    artist: str
    description: str | None = None
    cover_image: str | None = None
    release_date: str | None = None
    song_ids: List[str] | None = None


class AlbumUpdateRequest(CamelModel):
    name: str | None = None
    artist: str | None = None
    description: str | None = None
    cover_image: str | None = None
    release_date: str | None = None
    song_ids: List[str] | None = None


@router.get("", response_model=List[AlbumResponse])
def list_albums(db: Session = Depends(get_db)):
    """List albums with their effective cover image"""
    return AlbumService(db).get_all_with_covers()


@router.get("/{album_id}", response_model=AlbumResponse)
def get_album(album_id: str, db: Session = Depends(get_db)):
    return AlbumService(db).get_by_id(album_id)


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
def create_album(
    request: AlbumCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return AlbumService(db).create(request.model_dump())


@router.put("/{album_id}", response_model=AlbumResponse)
def update_album(
    album_id: str,
    request: AlbumUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return AlbumService(db).update(album_id, request.model_dump(exclude_unset=True))


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_album(
    album_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    AlbumService(db).delete(album_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{album_id}/songs/{song_id}", response_model=AlbumResponse)
def add_song_to_album(
    album_id: str,
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add a song; adding a song that is already present changes nothing"""
    return AlbumService(db).add_song_to_album(album_id, song_id)


@router.delete("/{album_id}/songs/{song_id}", response_model=AlbumResponse)
def remove_song_from_album(
    album_id: str,
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return AlbumService(db).remove_song_from_album(album_id, song_id)
