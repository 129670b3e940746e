"""User API endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from songshelf.api.common import CamelModel, UserResponse
from songshelf.database import get_db
from songshelf.security import get_current_user_id
from songshelf.services.auth_service import AuthService, public_user

router = APIRouter(prefix="/api/users", tags=["users"])


class FavoritesRequest(CamelModel):
    favorite_song_ids: List[str]


class FavoritesResponse(CamelModel):
    message: str
    favorite_song_ids: List[str]


@router.get("/me", response_model=UserResponse)
def get_me(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Profile of the authenticated user"""
    return public_user(AuthService(db).get_user(user_id))


@router.put("/favorites", response_model=FavoritesResponse)
def update_favorites(
    request: FavoritesRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Replace the authenticated user's favorite songs"""
    user = AuthService(db).update_favorites(user_id, request.favorite_song_ids)
    return {"message": "Favorites updated successfully", "favorite_song_ids": user.favorite_song_ids}
