"""Tests for syncing the media element with the engine."""

from unittest.mock import Mock

from songshelf.client.storage import MemoryStore
from songshelf.player.media import MediaBinding
from songshelf.player.queue_engine import PlaybackQueue

A = {"id": "a", "title": "A", "filePath": "/uploads/audio/a.mp3"}
B = {"id": "b", "title": "B", "filePath": "/uploads/audio/b.mp3"}


def _bind():
    engine = PlaybackQueue(MemoryStore())
    element = Mock()
    binding = MediaBinding(engine, element, base_url="http://localhost:3001/")
    return engine, element, binding


def test_play_loads_and_starts():
    """Test that playing a song loads its URL and starts the element."""
    engine, element, _ = _bind()

    engine.play(A)

    element.load.assert_called_once_with("http://localhost:3001/uploads/audio/a.mp3")
    element.play.assert_called_once()


def test_pause_pauses_element():
    engine, element, _ = _bind()
    engine.play(A)
    engine.pause()
    element.pause.assert_called_once()


def test_song_change_reloads():
    engine, element, _ = _bind()
    engine.set_queue([A, B])
    engine.play(A)
    engine.next()

    assert element.load.call_args_list[-1].args == ("http://localhost:3001/uploads/audio/b.mp3",)
    assert element.play.call_count == 2


def test_volume_follows_mute():
    engine, element, _ = _bind()
    engine.set_volume(0.4)
    element.set_volume.assert_called_with(0.4)
    engine.toggle_mute()
    element.set_volume.assert_called_with(0.0)


def test_play_failure_is_swallowed():
    """Test that a rejected play() leaves the engine state intact."""
    engine, element, _ = _bind()
    element.play.side_effect = RuntimeError("autoplay blocked")

    engine.play(A)

    assert engine.state.is_playing
    assert engine.state.current_song == A


def test_media_events_feed_engine():
    engine, _, binding = _bind()
    engine.play(A)

    binding.on_loaded_metadata(180.5)
    binding.on_time_update(12.25)

    assert engine.state.duration == 180.5
    assert engine.state.current_time == 12.25


def test_ended_advances_queue():
    engine, element, binding = _bind()
    engine.set_queue([A, B])
    engine.play(A)

    binding.on_ended()

    assert engine.state.current_song == B
    element.seek.assert_not_called()


def test_ended_with_repeat_replays():
    """Test that repeat seeks to the start and keeps the same song."""
    engine, element, binding = _bind()
    engine.set_queue([A, B])
    engine.play(A)
    engine.set_repeat(True)

    binding.on_ended()

    element.seek.assert_called_once_with(0)
    assert engine.state.current_song == A
    assert element.play.call_count == 2


def test_absolute_file_path_used_as_is():
    _, _, binding = _bind()
    assert binding.source_url({"filePath": "https://cdn.example.org/x.mp3"}) == "https://cdn.example.org/x.mp3"


def test_close_stops_syncing():
    engine, element, binding = _bind()
    binding.close()
    engine.play(A)
    element.load.assert_not_called()
