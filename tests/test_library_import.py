"""
Unit Tests for LibraryImporter

Tests for:
- Registering audio files from a directory
- Skipping files already in the library
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from tunebox.application.services.library_import import LibraryImporter
from tunebox.config.settings import LibrarySettings
from tunebox.domain.catalog.entities import Track
from tunebox.domain.shared.constants import LibraryConstants


def _track_validation_error() -> PydanticValidationError:
    try:
        Track(id=1, title="", audio_url="a.mp3")
    except PydanticValidationError as e:
        return e
    raise AssertionError("empty title should be rejected")


@pytest.fixture
def uploads_dir(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def importer(track_repository, uploads_dir):
    settings = LibrarySettings(uploads_dir=str(uploads_dir))
    return LibraryImporter(track_repository=track_repository, settings=settings)


class TestImportDirectory:
    """Tests for LibraryImporter.import_directory."""

    async def test_adds_audio_files(self, importer, uploads_dir, track_repository):
        """Should add one track per audio file, titled after the file stem."""
        (uploads_dir / "b-song.mp3").write_bytes(b"x")
        (uploads_dir / "a-song.OGG").write_bytes(b"x")
        (uploads_dir / "notes.txt").write_text("not audio")

        result = await importer.import_directory()

        assert result.added == 2
        assert result.skipped == 0
        assert result.added_titles == ["a-song", "b-song"]

        tracks = await track_repository.list_all()
        assert {t.title for t in tracks} == {"a-song", "b-song"}
        assert all(t.artist == LibraryConstants.DEFAULT_ARTIST for t in tracks)

    async def test_second_run_skips_existing(self, importer, uploads_dir, track_repository):
        (uploads_dir / "song.mp3").write_bytes(b"x")
        await importer.import_directory()

        result = await importer.import_directory()

        assert result.added == 0
        assert result.skipped == 1
        assert result.total == 1
        assert len(await track_repository.list_all()) == 1

    async def test_explicit_directory_plays_in_place(self, importer, tmp_path, track_repository):
        """Files outside the uploads directory should keep a playable path."""
        other = tmp_path / "Music"
        other.mkdir()
        (other / "take.wav").write_bytes(b"x")

        result = await importer.import_directory(other)

        assert result.added_titles == ["take"]
        (track,) = await track_repository.list_all()
        assert Path(track.audio_url).exists()
        assert Path(track.audio_url) == (other / "take.wav").resolve()

    async def test_explicit_directory_second_run_skips(self, importer, tmp_path):
        other = tmp_path / "Music"
        other.mkdir()
        (other / "take.wav").write_bytes(b"x")
        await importer.import_directory(other)

        result = await importer.import_directory(str(other))

        assert result.added == 0
        assert result.skipped == 1

    async def test_uploads_dir_files_are_stored_by_name(self, importer, uploads_dir, track_repository):
        (uploads_dir / "song.mp3").write_bytes(b"x")

        await importer.import_directory(uploads_dir)

        assert await track_repository.exists_by_stored_name("song.mp3")

    async def test_invalid_track_is_skipped(self, uploads_dir):
        """A file the library refuses should be counted as skipped, not abort the run."""
        (uploads_dir / "a.mp3").write_bytes(b"x")
        (uploads_dir / "b.mp3").write_bytes(b"x")
        repository = MagicMock()
        repository.exists_by_stored_name = AsyncMock(return_value=False)
        rejection = _track_validation_error()
        repository.add = AsyncMock(side_effect=[rejection, MagicMock()])
        importer = LibraryImporter(
            track_repository=repository, settings=LibrarySettings(uploads_dir=str(uploads_dir))
        )

        result = await importer.import_directory()

        assert result.added_titles == ["b"]
        assert result.skipped == 1

    async def test_missing_directory(self, importer, tmp_path):
        """Should return an empty result instead of failing."""
        result = await importer.import_directory(tmp_path / "missing")

        assert result.total == 0

    async def test_ignores_subdirectories(self, importer, uploads_dir):
        (uploads_dir / "nested.mp3").mkdir()

        result = await importer.import_directory()

        assert result.added == 0
