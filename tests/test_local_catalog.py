"""
Unit Tests for LocalLibraryCatalogSource

Tests for:
- Stored file naming
- Listing the local library
- Copying uploads into the uploads directory
"""

import re
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import aiosqlite
import pytest

from tunebox.application.services.catalog_service import CatalogApplicationService
from tunebox.config.settings import LibrarySettings
from tunebox.domain.shared.exceptions import CatalogUnavailableError, UploadFailedError
from tunebox.infrastructure.catalog.local_catalog import (
    LocalLibraryCatalogSource,
    stored_file_name,
)


@pytest.fixture
def library_settings(tmp_path):
    return LibrarySettings(uploads_dir=str(tmp_path / "uploads"), max_upload_mb=1)


@pytest.fixture
def source(track_repository, library_settings):
    return LocalLibraryCatalogSource(track_repository=track_repository, settings=library_settings)


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "incoming" / "Take Five.mp3"
    path.parent.mkdir()
    path.write_bytes(b"ID3" + b"\x00" * 64)
    return path


class TestStoredFileName:
    """Tests for stored_file_name."""

    def test_keeps_extension(self):
        assert re.fullmatch(r"\d{13}-\d+\.wav", stored_file_name(Path("take.wav")))

    def test_missing_extension_falls_back(self):
        assert stored_file_name(Path("noext")).endswith(".mp3")

    def test_names_are_unique(self):
        names = {stored_file_name(Path("a.mp3")) for _ in range(20)}

        assert len(names) == 20


class TestLocalFetch:
    """Tests for LocalLibraryCatalogSource.fetch_catalog."""

    async def test_empty_library(self, source):
        assert await source.fetch_catalog() == []

    async def test_database_error_is_unavailable(self, library_settings):
        repository = MagicMock()
        repository.list_all = AsyncMock(side_effect=aiosqlite.OperationalError("disk I/O error"))
        source = LocalLibraryCatalogSource(track_repository=repository, settings=library_settings)

        with pytest.raises(CatalogUnavailableError):
            await source.fetch_catalog()

    async def test_unreadable_row_is_unavailable(self, source, in_memory_database):
        """A row that is not a valid track should surface as an unavailable catalog."""
        await in_memory_database.execute(
            "INSERT INTO songs (title, artist, url) VALUES (?, ?, ?)", ("t" * 600, "Band", "x.mp3")
        )

        with pytest.raises(CatalogUnavailableError):
            await source.fetch_catalog()


class TestLocalUpload:
    """Tests for LocalLibraryCatalogSource.upload_track."""

    async def test_upload_copies_and_registers(self, source, audio_file, library_settings):
        """Should copy the file under a generated name and list it first."""
        track = await source.upload_track(audio_file)

        copied = list(Path(library_settings.uploads_dir).iterdir())
        assert len(copied) == 1
        assert copied[0].read_bytes() == audio_file.read_bytes()
        assert track.title == "Take Five"
        assert track.artist == library_settings.default_artist
        assert track.audio_url == str(copied[0])
        assert (await source.fetch_catalog())[0] == track

    async def test_upload_with_title_and_artist(self, source, audio_file):
        track = await source.upload_track(audio_file, title="Take 5", artist="Dave Brubeck")

        assert track.display_title == "Take 5 - Dave Brubeck"

    async def test_missing_file(self, source, tmp_path):
        with pytest.raises(UploadFailedError):
            await source.upload_track(tmp_path / "gone.mp3")

    async def test_too_large(self, source, tmp_path, library_settings):
        big = tmp_path / "big.mp3"
        big.write_bytes(b"\x00" * (1024 * 1024 + 1))

        with pytest.raises(UploadFailedError) as exc_info:
            await source.upload_track(big)

        assert "limit is 1 MB" in exc_info.value.message
        assert not Path(library_settings.uploads_dir).exists()

    async def test_failed_insert_removes_copy(self, audio_file, library_settings):
        """A database failure should not leave an orphaned file behind."""
        repository = MagicMock()
        repository.add = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
        source = LocalLibraryCatalogSource(track_repository=repository, settings=library_settings)

        with pytest.raises(UploadFailedError):
            await source.upload_track(audio_file)

        assert list(Path(library_settings.uploads_dir).iterdir()) == []

    async def test_invalid_title_is_rejected(self, source, audio_file, library_settings):
        """An over-long title should fail cleanly and leave nothing behind."""
        with pytest.raises(UploadFailedError) as exc_info:
            await source.upload_track(audio_file, title="t" * 600)

        assert "Track details are invalid" in exc_info.value.message
        assert list(Path(library_settings.uploads_dir).iterdir()) == []
        assert await source.fetch_catalog() == []


class TestLocalLibraryWithCatalogService:
    """The local source behind the catalog service."""

    @pytest.fixture
    def service(self, source, controller):
        return CatalogApplicationService(catalog_source=source, playback_controller=controller)

    async def test_failed_upload_keeps_catalog_loadable(self, service, audio_file, controller):
        await service.upload(audio_file, title="Intro")

        failed = await service.upload(audio_file, title="t" * 600)
        loaded = await service.load()

        assert not failed.success
        assert failed.catalog_length == 1
        assert loaded.success
        assert [t.title for t in controller.catalog] == ["Intro"]

    async def test_upload_then_load(self, service, audio_file, controller):
        uploaded = await service.upload(audio_file)
        loaded = await service.load()

        assert uploaded.success
        assert loaded.track_count == 1
        assert controller.catalog == (uploaded.track,)
