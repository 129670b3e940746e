"""Playback queue engine

Single-threaded state machine behind the player: current song, ordered
queue, current index, volume/mute and transport operations. Every operation
is total; invalid input (empty queue, out-of-range index) leaves the state
as it was. Observers are notified after each transition, and the persisted
subset of the state is written to a client-local store.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional
import logging

from songshelf.client.storage import MemoryStore

logger = logging.getLogger(__name__)

STATE_KEY = "audio_player_state"

# A song snapshot is the JSON object the API returned for that song
Song = Dict[str, Any]
Listener = Callable[["PlayerState"], None]


@dataclass
class PlayerState:
    current_song: Optional[Song] = None
    queue: List[Song] = field(default_factory=list)
    current_index: int = -1
    is_playing: bool = False
    volume: float = 1.0
    is_muted: bool = False
    current_time: float = 0.0
    duration: float = 0.0

    def persisted(self) -> Dict[str, Any]:
        """The part of the state that survives a reload"""
        return {
            "current_song": self.current_song,
            "queue": list(self.queue),
            "current_index": self.current_index,
            "volume": self.volume,
            "is_muted": self.is_muted,
        }

    def snapshot(self) -> "PlayerState":
        return replace(self, queue=list(self.queue))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def state_from_persisted(raw: Any) -> PlayerState:
    """
    Rebuild state from a persisted document

    Fields that are missing or malformed fall back to their defaults. Playing
    flag, position and duration always start at False/0/0.
    """
    state = PlayerState()
    if not isinstance(raw, dict):
        return state

    queue = raw.get("queue")
    if isinstance(queue, list) and all(isinstance(song, dict) for song in queue):
        state.queue = list(queue)

    current_song = raw.get("current_song")
    if isinstance(current_song, dict):
        state.current_song = current_song

    index = raw.get("current_index")
    if isinstance(index, int) and not isinstance(index, bool) and -1 <= index < len(state.queue):
        state.current_index = index

    volume = raw.get("volume")
    if _is_number(volume) and 0 <= volume <= 1:
        state.volume = float(volume)

    if isinstance(raw.get("is_muted"), bool):
        state.is_muted = raw["is_muted"]

    return state


class PlaybackQueue:
    """Owns a PlayerState and applies transport/queue operations to it"""

    def __init__(self, store=None, state_key: str = STATE_KEY):
        """
        Initialize the engine, restoring any previously persisted state

        Args:
            store: Object with get(key)/set(key, value); defaults to in-memory
            state_key: Key the persisted state lives under
        """
        self.store = store if store is not None else MemoryStore()
        self.state_key = state_key
        self.repeat = False
        self._listeners: List[Listener] = []
        self.state = self._load()

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with a state snapshot after each change; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        snapshot = self.state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Player state listener failed")

    # Persistence

    def _load(self) -> PlayerState:
        try:
            raw = self.store.get(self.state_key)
        except Exception as e:
            logger.warning(f"Could not load player state, starting empty: {e}")
            return PlayerState()
        return state_from_persisted(raw)

    def _save(self):
        try:
            self.store.set(self.state_key, self.state.persisted())
        except Exception as e:
            logger.warning(f"Could not save player state: {e}")

    def _commit(self, persist: bool = True):
        if persist:
            self._save()
        self._notify()

    # Helpers

    def _index_of(self, song: Song) -> int:
        song_id = song.get("id")
        for index, queued in enumerate(self.state.queue):
            if queued.get("id") == song_id:
                return index
        return -1

    def _valid_index(self, index: Any) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self.state.queue)

    # Transport

    def play(self, song: Optional[Song]):
        """Play a song, queueing it at the end if it is not already queued"""
        if not isinstance(song, dict):
            return
        state = self.state
        state.current_song = song
        state.is_playing = True

        index = self._index_of(song)
        if index == -1:
            state.queue = [*state.queue, song]
            state.current_index = len(state.queue) - 1
        else:
            state.current_index = index
        self._commit()

    def pause(self):
        self.state.is_playing = False
        self._commit()

    def resume(self):
        if self.state.current_song is None:
            return
        self.state.is_playing = True
        self._commit()

    def next(self):
        """Advance one slot, wrapping from the last song to the first"""
        state = self.state
        if not state.queue:
            return
        state.current_index = (state.current_index + 1) % len(state.queue)
        state.current_song = state.queue[state.current_index]
        self._commit()

    def previous(self):
        """Step back one slot, wrapping from the first song to the last"""
        state = self.state
        if not state.queue:
            return
        if state.current_index <= 0:
            state.current_index = len(state.queue) - 1
        else:
            state.current_index -= 1
        state.current_song = state.queue[state.current_index]
        self._commit()

    def track_ended(self):
        """Media element finished the current track: restart it on repeat, otherwise advance"""
        if self.repeat and self.state.current_song is not None:
            self.state.current_time = 0.0
            self.state.is_playing = True
            self._commit()
        else:
            self.next()

    # Queue

    def set_queue(self, songs: List[Song]):
        """
        Replace the queue

        With no index set, a non-empty queue starts at its first song. An
        index past the end of the new queue is pulled back to its last slot.
        """
        if not isinstance(songs, (list, tuple)):
            return
        state = self.state
        state.queue = [song for song in songs if isinstance(song, dict)]

        if not state.queue:
            state.current_index = -1
        elif state.current_index == -1:
            state.current_index = 0
            state.current_song = state.queue[0]
        elif state.current_index >= len(state.queue):
            state.current_index = len(state.queue) - 1
            state.current_song = state.queue[state.current_index]
        self._commit()

    def add_to_queue(self, song: Song):
        if not isinstance(song, dict):
            return
        self.state.queue = [*self.state.queue, song]
        self._commit()

    def remove_from_queue(self, index: int):
        """Remove one slot, keeping current_index on the same song where possible"""
        if not self._valid_index(index):
            return
        state = self.state
        queue = list(state.queue)
        queue.pop(index)
        state.queue = queue

        if index < state.current_index:
            state.current_index -= 1
        elif index == state.current_index:
            if not queue:
                state.current_song = None
                state.current_index = -1
                state.is_playing = False
            else:
                new_index = min(index, len(queue) - 1)
                state.current_index = new_index
                state.current_song = queue[new_index]
        self._commit()

    def set_current_index(self, index: int):
        """Jump to a queue slot"""
        if not self._valid_index(index):
            return
        self.state.current_index = index
        self.state.current_song = self.state.queue[index]
        self._commit()

    # Volume and position

    def set_volume(self, volume: float):
        """Set volume in [0, 1]; a volume of zero also mutes"""
        if not _is_number(volume):
            return
        volume = min(1.0, max(0.0, float(volume)))
        self.state.volume = volume
        self.state.is_muted = volume == 0
        self._commit()

    def set_muted(self, muted: bool):
        self.state.is_muted = bool(muted)
        self._commit()

    def toggle_mute(self):
        self.set_muted(not self.state.is_muted)

    def set_repeat(self, repeat: bool):
        self.repeat = bool(repeat)
        self._notify()

    def set_current_time(self, seconds: float):
        if not _is_number(seconds):
            return
        self.state.current_time = max(0.0, float(seconds))
        self._commit(persist=False)

    def set_duration(self, seconds: float):
        if not _is_number(seconds):
            return
        self.state.duration = max(0.0, float(seconds))
        self._commit(persist=False)
