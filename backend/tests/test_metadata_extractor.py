"""Tests for audio metadata extraction."""

import base64
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from mutagen.flac import FLAC, Picture
from mutagen.id3 import APIC, TALB, TDRC, TIT2, TPE1, TRCK
from mutagen.wave import WAVE

from songshelf.utils.metadata_extractor import (
    AudioMetadata,
    ExtractionError,
    MetadataExtractor,
    _parse_number,
    _parse_year,
)
from conftest import write_wav


class TestMetadataExtractor:
    """Test extraction against real files on disk."""

    def test_untagged_wav(self, wav_file):
        """Test that a WAV without tags yields duration and no tag values."""
        metadata = MetadataExtractor().extract(wav_file)

        assert isinstance(metadata, AudioMetadata)
        assert metadata.duration == 2
        assert metadata.title is None
        assert metadata.artist is None
        assert metadata.album is None
        assert metadata.cover is None

    def test_garbage_file_raises(self, tmp_path):
        """Test that bytes that are not audio raise ExtractionError."""
        bogus = tmp_path / "bogus.mp3"
        bogus.write_bytes(b"definitely not audio " * 200)

        with pytest.raises(ExtractionError):
            MetadataExtractor().extract(bogus)

    def test_missing_file_raises(self, tmp_path):
        """Test that a missing path raises ExtractionError."""
        with pytest.raises(ExtractionError):
            MetadataExtractor().extract(tmp_path / "missing.flac")

    def test_cover_of_untagged_file_is_none(self, wav_file):
        assert MetadataExtractor().extract_cover(wav_file) is None


class TestParsers:
    """Test tag value parsing helpers."""

    def test_track_number_with_total(self):
        assert _parse_number("3/12") == 3

    def test_track_number_invalid(self):
        assert _parse_number("side A") is None
        assert _parse_number(None) is None

    def test_year_from_full_date(self):
        assert _parse_year("2014-05-01") == 2014

    def test_year_invalid(self):
        assert _parse_year("unknown") is None
        assert _parse_year("") is None

COVER = b"\xff\xd8\xffcover-bytes"


def _tagged_wav(path):
    """WAV carrying ID3 text frames and an APIC picture."""
    write_wav(path, seconds=1)
    audio = WAVE(str(path))
    audio.add_tags()
    audio.tags.add(TIT2(encoding=3, text="Hello"))
    audio.tags.add(TPE1(encoding=3, text="Me"))
    audio.tags.add(TALB(encoding=3, text="Demos"))
    audio.tags.add(TDRC(encoding=3, text="2014-05-01"))
    audio.tags.add(TRCK(encoding=3, text="4/10"))
    audio.tags.add(APIC(encoding=3, mime="image/jpeg", type=3, desc="Cover", data=COVER))
    audio.save()
    return path


def _flac(path, seconds=3, rate=44100):
    """Bare FLAC stream: the marker plus a single STREAMINFO block, no frames."""
    info = (rate << 44) | (1 << 41) | (15 << 36) | (rate * seconds)
    streaminfo = (
        (4096).to_bytes(2, "big") * 2
        + bytes(6)
        + info.to_bytes(8, "big")
        + bytes(16)
    )
    path.write_bytes(b"fLaC" + bytes([0x80]) + len(streaminfo).to_bytes(3, "big") + streaminfo)
    return path


def _picture(data):
    picture = Picture()
    picture.type = 3
    picture.mime = "image/png"
    picture.data = data
    return picture


class TestTaggedFiles:
    """Test extraction from files that carry real tags."""

    def test_id3_tags_on_wav(self, tmp_path):
        """Test that raw ID3 frames map onto the metadata fields."""
        metadata = MetadataExtractor().extract(_tagged_wav(tmp_path / "tagged.wav"))

        assert (metadata.title, metadata.artist, metadata.album) == ("Hello", "Me", "Demos")
        assert metadata.year == 2014
        assert metadata.track_number == 4
        assert metadata.duration == 1
        assert metadata.cover == COVER

    def test_flac_vorbis_comments_and_picture(self, tmp_path):
        path = _flac(tmp_path / "song.flac")
        audio = FLAC(str(path))
        audio.add_tags()
        audio.tags["title"] = "Flac Song"
        audio.tags["artist"] = "Band"
        audio.tags["discnumber"] = "2"
        audio.add_picture(_picture(b"\x89PNGflac"))
        audio.save()

        metadata = MetadataExtractor().extract(path)

        assert (metadata.title, metadata.artist) == ("Flac Song", "Band")
        assert metadata.album is None
        assert metadata.disc_number == 2
        assert metadata.duration == 3
        assert metadata.cover == b"\x89PNGflac"

    def test_mp4_cover(self, tmp_path):
        audio = SimpleNamespace(pictures=None, tags={"covr": [b"mp4-cover"]})
        with patch("songshelf.utils.metadata_extractor.mutagen.File", return_value=audio):
            assert MetadataExtractor().extract_cover(tmp_path / "song.m4a") == b"mp4-cover"

    def test_ogg_picture_block(self, tmp_path):
        block = base64.b64encode(_picture(b"ogg-cover").write()).decode("ascii")
        audio = SimpleNamespace(pictures=None, tags={"metadata_block_picture": [block]})
        with patch("songshelf.utils.metadata_extractor.mutagen.File", return_value=audio):
            assert MetadataExtractor().extract_cover(tmp_path / "song.ogg") == b"ogg-cover"

    def test_corrupt_picture_block_gives_no_cover(self, tmp_path):
        audio = SimpleNamespace(pictures=None, tags={"metadata_block_picture": ["%%%"]})
        with patch("songshelf.utils.metadata_extractor.mutagen.File", return_value=audio):
            assert MetadataExtractor().extract_cover(tmp_path / "song.ogg") is None


class TestDuration:
    """Test duration rounding."""

    def test_half_second_rounds_up(self, tmp_path):
        metadata = MetadataExtractor().extract(write_wav(tmp_path / "half.wav", seconds=2.5))
        assert metadata.duration == 3

    def test_below_half_rounds_down(self, tmp_path):
        metadata = MetadataExtractor().extract(write_wav(tmp_path / "short.wav", seconds=2.25))
        assert metadata.duration == 2
