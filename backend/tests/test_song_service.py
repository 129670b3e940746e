"""Tests for song upload ingestion and song CRUD."""

import io
from unittest.mock import Mock

import pytest

from songshelf.config import settings
from songshelf.errors import NotFoundError, ValidationError
from songshelf.services.song_service import SongService
from songshelf.utils.metadata_extractor import AudioMetadata, ExtractionError, MetadataExtractor

NOT_AUDIO = b"plain text, no frames here " * 50


def _upload(service, name="track7.mp3", data=NOT_AUDIO):
    return service.upload_song(name, io.BytesIO(data))


class TestUpload:
    """Test the upload pipeline."""

    def test_untagged_upload_falls_back_to_defaults(self, db):
        """Test that a file without readable tags still becomes a Song."""
        song = _upload(SongService(db))

        assert song.title == "track7.mp3"
        assert song.artist == "Unknown Artist"
        assert song.album == "Unknown Album"
        assert song.duration == 0
        assert song.album_cover is None
        assert song.created_at == song.updated_at

    def test_stored_file_has_generated_name(self, db):
        """Test that the audio is stored under a generated name with its extension."""
        song = _upload(SongService(db))

        assert song.file_path.startswith("/uploads/audio/")
        assert song.file_path.endswith(".mp3")
        assert "track7" not in song.file_path
        stored = settings.resolve_upload_path(song.file_path)
        assert stored.read_bytes() == NOT_AUDIO

    def test_extractor_failure_is_not_fatal(self, db):
        extractor = Mock(spec=MetadataExtractor)
        extractor.extract.side_effect = ExtractionError("boom")

        song = _upload(SongService(db, extractor=extractor), name="demo.flac")

        assert song.title == "demo.flac"
        assert song.duration == 0

    def test_tags_and_cover_are_used(self, db):
        """Test that extracted tags and cover art end up on the record."""
        extractor = Mock(spec=MetadataExtractor)
        extractor.extract.return_value = AudioMetadata(
            title="Blue", artist="Joni", album="Folk", duration=185, year=1971, cover=b"cover-bytes"
        )

        song = _upload(SongService(db, extractor=extractor))

        assert (song.title, song.artist, song.album, song.duration) == ("Blue", "Joni", "Folk", 185)
        assert song.release_date == "1971"
        assert song.album_cover.startswith("/uploads/covers/")
        assert settings.resolve_upload_path(song.album_cover).read_bytes() == b"cover-bytes"

    def test_real_wav_duration(self, db, wav_file):
        with open(wav_file, "rb") as stream:
            song = SongService(db).upload_song("silence.wav", stream)
        assert song.duration == 2
        assert song.title == "silence.wav"

    def test_missing_file_rejected(self, db):
        with pytest.raises(ValidationError, match="No audio file provided"):
            SongService(db).upload_song(None, None)

    def test_wrong_extension_rejected(self, db):
        with pytest.raises(ValidationError, match="Invalid audio file format"):
            _upload(SongService(db), name="notes.txt")

    def test_extension_check_is_case_insensitive(self, db):
        assert SongService.is_valid_audio_file("LOUD.MP3")
        assert not SongService.is_valid_audio_file("archive.zip")

    def test_too_large_rejected_and_removed(self, db, monkeypatch):
        """Test that oversized uploads fail and leave nothing behind."""
        monkeypatch.setattr(settings, "max_upload_size", 100)

        with pytest.raises(ValidationError, match="File too large"):
            _upload(SongService(db), data=b"x" * 101)

        assert list(settings.audio_dir.iterdir()) == []
        assert SongService(db).get_all_songs() == []


class TestReadUpdateDelete:
    """Test song lookup, edits and removal."""

    def test_get_unknown_song(self, db):
        with pytest.raises(NotFoundError, match="Song not found"):
            SongService(db).get_song_by_id("nope")

    def test_update_ignores_unknown_fields(self, db):
        """Test that only editable fields change."""
        service = SongService(db)
        song = _upload(service)
        original_path = song.file_path

        updated = service.update_song(song.id, {
            "title": "Renamed",
            "lyrics": "la la",
            "file_path": "/etc/passwd",
            "duration": 999,
        })

        assert updated.title == "Renamed"
        assert updated.lyrics == "la la"
        assert updated.file_path == original_path
        assert updated.duration == 0

    def test_update_null_clears_lyrics(self, db):
        service = SongService(db)
        song = service.update_song(_upload(service).id, {"lyrics": "la la"})

        updated = service.update_song(song.id, {"lyrics": None})

        assert updated.lyrics is None
        assert updated.title == "track7.mp3"

    def test_update_null_title_rejected(self, db):
        """Test that required text fields cannot be cleared."""
        service = SongService(db)
        song = _upload(service)

        with pytest.raises(ValidationError, match="title"):
            service.update_song(song.id, {"title": None})

    def test_update_unknown_song(self, db):
        with pytest.raises(NotFoundError):
            SongService(db).update_song("nope", {"title": "x"})

    def test_delete_removes_record_and_files(self, db):
        extractor = Mock(spec=MetadataExtractor)
        extractor.extract.return_value = AudioMetadata(cover=b"img")
        service = SongService(db, extractor=extractor)
        song = _upload(service)
        audio_path = settings.resolve_upload_path(song.file_path)
        cover_path = settings.resolve_upload_path(song.album_cover)

        service.delete_song(song.id)

        assert not audio_path.exists()
        assert not cover_path.exists()
        with pytest.raises(NotFoundError):
            service.get_song_by_id(song.id)

    def test_delete_tolerates_missing_files(self, db):
        """Test that a file already gone does not block deleting the record."""
        service = SongService(db)
        song = _upload(service)
        settings.resolve_upload_path(song.file_path).unlink()

        service.delete_song(song.id)

        assert service.get_all_songs() == []


class TestSearch:
    """Test filtering and sorting."""

    @pytest.fixture
    def library(self, db):
        extractor = Mock(spec=MetadataExtractor)
        extractor.extract.side_effect = [
            AudioMetadata(title="Alpha", artist="Zed", album="Rock", duration=30),
            AudioMetadata(title="beta", artist="Amy", album="Jazz", duration=10),
            AudioMetadata(title="Gamma", artist="Amy", album="Rock", duration=20),
        ]
        service = SongService(db, extractor=extractor)
        for _ in range(3):
            _upload(service)
        return service

    def test_query_matches_any_text_field(self, library):
        assert {s.title for s in library.search_songs(query="amy")} == {"beta", "Gamma"}
        assert {s.title for s in library.search_songs(query="ROCK")} == {"Alpha", "Gamma"}

    def test_filters(self, library):
        assert [s.title for s in library.search_songs(artist="Amy", album="Rock")] == ["Gamma"]

    def test_sort_by_title_ignores_case(self, library):
        titles = [s.title for s in library.search_songs(sort_by="title", sort_order="asc")]
        assert titles == ["Alpha", "beta", "Gamma"]

    def test_sort_by_duration_desc(self, library):
        durations = [s.duration for s in library.search_songs(sort_by="duration")]
        assert durations == [30, 20, 10]

    def test_invalid_sort_rejected(self, library):
        with pytest.raises(ValidationError):
            library.search_songs(sort_by="file_path")
        with pytest.raises(ValidationError):
            library.search_songs(sort_order="sideways")

    def test_distinct_artists_and_albums(self, library):
        assert library.list_artists() == ["Amy", "Zed"]
        assert library.list_albums() == ["Jazz", "Rock"]
