"""Pytest configuration for backend tests.

Points the application at a throwaway SQLite database and upload directory
before any songshelf module reads its settings.
"""

import os
import shutil
import tempfile
import wave
from pathlib import Path

import pytest

_test_root = Path(tempfile.mkdtemp(prefix="songshelf-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_test_root / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_test_root / "uploads")
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"

from songshelf.config import settings  # noqa: E402
from songshelf.database import Base, SessionLocal, engine  # noqa: E402
import songshelf.models  # noqa: E402,F401


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh tables and an empty upload directory for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    shutil.rmtree(settings.upload_dir, ignore_errors=True)
    yield
    shutil.rmtree(settings.upload_dir, ignore_errors=True)


@pytest.fixture
def db():
    """Database session bound to the test database."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registered_user(db):
    """Register a user and return the service result ({"token", "user"})."""
    from songshelf.services.auth_service import AuthService

    return AuthService(db).register("alice", "alice@mail.com", "secret123")


@pytest.fixture
def auth_headers(registered_user):
    """Authorization header for the registered user."""
    return {"Authorization": f"Bearer {registered_user['token']}"}


def write_wav(path: Path, seconds: float = 1, rate: int = 8000) -> Path:
    """Write a silent mono 16-bit WAV file."""
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x00" * int(rate * seconds))
    return path


@pytest.fixture
def wav_file(tmp_path):
    """A valid two second WAV file without tags."""
    return write_wav(tmp_path / "silence.wav", seconds=2)
