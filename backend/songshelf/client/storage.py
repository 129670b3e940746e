"""Client-local persisted key/value stores"""
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging
import os

logger = logging.getLogger(__name__)

SESSION_KEY = "session"


class MemoryStore:
    """Non-durable store, used when no file is configured"""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value

    def remove(self, key: str):
        self._data.pop(key, None)


class JsonFileStore:
    """
    Durable store keeping every key in one JSON document on disk

    A missing or unreadable document reads as empty; values are replaced
    with an atomic rename so a crash never leaves half a file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any):
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str):
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class SessionStore:
    """Keeps the bearer token and user profile between runs"""

    def __init__(self, store=None, key: str = SESSION_KEY):
        self.store = store if store is not None else MemoryStore()
        self.key = key

    def _session(self) -> Optional[Dict[str, Any]]:
        try:
            session = self.store.get(self.key)
        except Exception as e:
            logger.warning(f"Could not read session: {e}")
            return None
        if not isinstance(session, dict) or not isinstance(session.get("token"), str):
            return None
        return session

    @property
    def token(self) -> Optional[str]:
        session = self._session()
        return session["token"] if session else None

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        session = self._session()
        user = session.get("user") if session else None
        return user if isinstance(user, dict) else None

    def save(self, token: str, user: Dict[str, Any]):
        self.store.set(self.key, {"token": token, "user": user})

    def clear(self):
        self.store.remove(self.key)
