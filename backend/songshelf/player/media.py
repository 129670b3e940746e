"""Keeps a media element in step with the playback queue engine"""
from typing import Optional, Protocol
import logging

from songshelf.player.queue_engine import PlaybackQueue, PlayerState, Song

logger = logging.getLogger(__name__)


class MediaElement(Protocol):
    """The single shared audio output the player drives"""

    def load(self, src: str) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...


class MediaBinding:
    """
    Subscribe to an engine and mirror its state onto a media element

    Media callbacks (time updates, loaded metadata, track ended) are fed back
    into the engine through on_time_update/on_loaded_metadata/on_ended.
    Playback start failures are logged and otherwise ignored.
    """

    def __init__(self, engine: PlaybackQueue, element: MediaElement, base_url: str = ""):
        self.engine = engine
        self.element = element
        self.base_url = base_url.rstrip("/")
        self._loaded_song_id: Optional[str] = None
        self._element_playing = False
        self.unsubscribe = engine.subscribe(self.sync)
        self.sync(engine.state)

    def source_url(self, song: Song) -> str:
        path = song.get("filePath") or song.get("file_path") or ""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}{path}"

    def sync(self, state: PlayerState):
        song = state.current_song
        song_id = song.get("id") if song else None

        if song_id != self._loaded_song_id:
            self._loaded_song_id = song_id
            self._element_playing = False
            if song is not None:
                try:
                    self.element.load(self.source_url(song))
                except Exception as e:
                    logger.warning(f"Could not load {song_id}: {e}")

        if state.is_playing and song is not None and not self._element_playing:
            self._start()
        elif not state.is_playing and self._element_playing:
            self._element_playing = False
            try:
                self.element.pause()
            except Exception as e:
                logger.warning(f"Pause failed: {e}")

        try:
            self.element.set_volume(0.0 if state.is_muted else state.volume)
        except Exception as e:
            logger.warning(f"Could not set volume: {e}")

    def _start(self):
        try:
            self.element.play()
            self._element_playing = True
        except Exception as e:
            logger.warning(f"Playback did not start: {e}")

    def on_time_update(self, seconds: float):
        self.engine.set_current_time(seconds)

    def on_loaded_metadata(self, duration: float):
        self.engine.set_duration(duration)

    def on_ended(self):
        """Track finished: replay it on repeat, otherwise let the engine advance"""
        self._element_playing = False
        if self.engine.repeat:
            try:
                self.element.seek(0)
            except Exception as e:
                logger.warning(f"Seek failed: {e}")
        self.engine.track_ended()

    def seek(self, seconds: float):
        """User scrubbed the position slider"""
        try:
            self.element.seek(seconds)
        except Exception as e:
            logger.warning(f"Seek failed: {e}")
        self.engine.set_current_time(seconds)

    def close(self):
        self.unsubscribe()
