"""HTTP client for the Songshelf API"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import requests

from songshelf.client.storage import SessionStore
from songshelf.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ApiError(Exception):
    """The server answered with an error status"""

    def __init__(self, status_code: int, message: str, data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.data = data


class NetworkError(Exception):
    """The request never got an answer (connection failure, timeout)"""

    def __init__(self, message: str = "Network error occurred"):
        super().__init__(message)


class UploadRejected(ValueError):
    """The file failed the upload checks before anything was sent"""


class ApiClient:
    """Thin wrapper over requests; one call per request, no retries"""

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        session_store: Optional[SessionStore] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store or SessionStore()
        self.timeout = timeout
        self.http = http or requests.Session()

    def _headers(self) -> Dict[str, str]:
        token = self.session_store.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            resp = self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise NetworkError(str(e)) from e

        if resp.status_code >= 400:
            raise self._error_from(resp)

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _error_from(resp: requests.Response) -> ApiError:
        data = None
        message = resp.reason or f"HTTP {resp.status_code}"
        try:
            data = resp.json()
        except ValueError:
            pass
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]
            elif isinstance(error, str):
                message = error
        return ApiError(resp.status_code, message, data)

    # Auth

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        result = self._request("POST", "/api/auth/register",
                               json={"username": username, "email": email, "password": password})
        self.session_store.save(result["token"], result["user"])
        return result

    def login(self, email: str, password: str) -> Dict[str, Any]:
        result = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.session_store.save(result["token"], result["user"])
        return result

    def logout(self):
        self.session_store.clear()

    @property
    def is_authenticated(self) -> bool:
        return self.session_store.token is not None

    # Songs

    def list_songs(self, query: Optional[str] = None, artist: Optional[str] = None,
                   album: Optional[str] = None, sort_by: Optional[str] = None,
                   sort_order: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {
            "q": query,
            "artist": artist,
            "album": album,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        }
        return self._request("GET", "/api/songs", params={k: v for k, v in params.items() if v})

    def get_song(self, song_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/songs/{song_id}")

    def check_upload(self, path: Path):
        """
        Apply the server's upload rules locally

        Raises:
            UploadRejected: extension not allowed or file over the size limit
        """
        if path.suffix.lower() not in settings.allowed_extensions_list:
            raise UploadRejected(
                f"Please select a valid audio file ({', '.join(settings.allowed_extensions_list)})"
            )
        size_mb = settings.max_upload_size // (1024 * 1024)
        if path.stat().st_size > settings.max_upload_size:
            raise UploadRejected(f"File size must be less than {size_mb}MB")

    def upload_song(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """Upload an audio file; rejected files never reach the server"""
        path = Path(file_path)
        self.check_upload(path)
        with open(path, "rb") as f:
            return self._request("POST", "/api/songs/upload", files={"audio": (path.name, f)})

    def update_song(self, song_id: str, **changes) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/songs/{song_id}", json=changes)

    def delete_song(self, song_id: str):
        return self._request("DELETE", f"/api/songs/{song_id}")

    # Playlists

    def list_playlists(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/playlists")

    def create_playlist(self, name: str, description: Optional[str] = None,
                        song_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        return self._request("POST", "/api/playlists",
                             json={"name": name, "description": description, "songIds": song_ids or []})

    def update_playlist(self, playlist_id: str, **changes) -> Dict[str, Any]:
        return self._request("PUT", f"/api/playlists/{playlist_id}", json=changes)

    def delete_playlist(self, playlist_id: str):
        return self._request("DELETE", f"/api/playlists/{playlist_id}")

    def add_song_to_playlist(self, playlist_id: str, song_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/playlists/{playlist_id}/songs/{song_id}")

    def remove_song_from_playlist(self, playlist_id: str, song_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/playlists/{playlist_id}/songs/{song_id}")

    # Albums

    def list_albums(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/albums")

    def create_album(self, name: str, artist: str, **fields) -> Dict[str, Any]:
        return self._request("POST", "/api/albums", json={"name": name, "artist": artist, **fields})

    def update_album(self, album_id: str, **changes) -> Dict[str, Any]:
        return self._request("PUT", f"/api/albums/{album_id}", json=changes)

    def delete_album(self, album_id: str):
        return self._request("DELETE", f"/api/albums/{album_id}")

    def add_song_to_album(self, album_id: str, song_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/albums/{album_id}/songs/{song_id}")

    def remove_song_from_album(self, album_id: str, song_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/albums/{album_id}/songs/{song_id}")

    # Users

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/users/me")

    def update_favorites(self, favorite_song_ids: List[str]) -> Dict[str, Any]:
        return self._request("PUT", "/api/users/favorites", json={"favoriteSongIds": favorite_song_ids})
