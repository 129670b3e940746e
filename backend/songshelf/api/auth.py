"""Auth API endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import EmailStr, Field

from songshelf.api.common import CamelModel, AuthResponse
from songshelf.database import get_db
from songshelf.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a bearer token"""
    return AuthService(db).register(request.username, request.email, request.password)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    return AuthService(db).login(request.email, request.password)
