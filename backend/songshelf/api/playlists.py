"""Playlists API endpoints"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from songshelf.api.common import CamelModel, PlaylistResponse
from songshelf.database import get_db
from songshelf.security import get_current_user_id
from songshelf.services.playlist_service import PlaylistService

router = APIRouter(prefix="/api/playlists", tags=["playlists"])


class PlaylistCreateRequest(CamelModel):
    name: str
    description: str | None = None
    cover_image: str | None = None
    song_ids: List[str] | None = None


class PlaylistUpdateRequest(CamelModel):
    name: str | None = None
    description: str | None = None
    cover_image: str | None = None
    song_ids: List[str] | None = None


@router.get("", response_model=List[PlaylistResponse])
def list_playlists(db: Session = Depends(get_db)):
    """List playlists with their effective cover image"""
    return PlaylistService(db).get_all_with_covers()


@router.get("/{playlist_id}", response_model=PlaylistResponse)
def get_playlist(playlist_id: str, db: Session = Depends(get_db)):
    return PlaylistService(db).get_by_id(playlist_id)


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
def create_playlist(
    request: PlaylistCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return PlaylistService(db).create(request.model_dump())


@router.put("/{playlist_id}", response_model=PlaylistResponse)
def update_playlist(
    playlist_id: str,
    request: PlaylistUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return PlaylistService(db).update(playlist_id, request.model_dump(exclude_unset=True))


@router.delete("/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_playlist(
    playlist_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    PlaylistService(db).delete(playlist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{playlist_id}/songs/{song_id}", response_model=PlaylistResponse)
def add_song_to_playlist(
    playlist_id: str,
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add a song; adding a song that is already present changes nothing"""
    return PlaylistService(db).add_song_to_playlist(playlist_id, song_id)


@router.delete("/{playlist_id}/songs/{song_id}", response_model=PlaylistResponse)
def remove_song_from_playlist(
    playlist_id: str,
    song_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return PlaylistService(db).remove_song_from_playlist(playlist_id, song_id)
