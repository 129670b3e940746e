"""Auth service: registration, login and user profile updates"""
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Dict, Any, List
import logging
import uuid

from songshelf.errors import AuthenticationError, ConflictError, NotFoundError, InternalServerError
from songshelf.models.user import User
from songshelf.repositories import UserRepository
from songshelf.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def public_user(user: User) -> Dict[str, Any]:
    """User fields that are safe to hand to clients"""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "favorite_song_ids": list(user.favorite_song_ids or []),
    }


class AuthService:
    """Service for user accounts and credentials"""

    def __init__(self, db: Session):
        """
        Initialize auth service

        Args:
            db: Database session
        """
        self.db = db
        self.users = UserRepository(db)

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Create an account and issue a token

        Returns:
            {"token": str, "user": public profile}

        Raises:
            ConflictError: email or username already taken
        """
        if self.users.get_by_email(email):
            raise ConflictError("User with this email already exists")
        if self.users.get_by_username(username):
            raise ConflictError("User with this username already exists")

        now = datetime.utcnow()
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            favorite_song_ids=[],
            created_at=now,
            updated_at=now,
        )

        try:
            self.users.create(user)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Username or email already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError("Failed to register user") from e

        logger.info(f"Registered user {user.username} ({user.id})")
        return {"token": self._issue_token(user), "user": public_user(user)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check credentials and issue a token

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials")

        return {"token": self._issue_token(user), "user": public_user(user)}

    def get_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise NotFoundError("User")
        return user

    def update_favorites(self, user_id: str, favorite_song_ids: List[str]) -> User:
        """Replace the user's favorite song list"""
        user = self.get_user(user_id)
        user.favorite_song_ids = list(favorite_song_ids)
        user.updated_at = datetime.utcnow()

        try:
            self.users.update(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalServerError("Failed to update user favorites") from e

        return user

    @staticmethod
    def _issue_token(user: User) -> str:
        return create_access_token({"sub": user.id, "email": user.email})
