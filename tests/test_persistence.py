"""Unit tests for the persistence layer.

Tests for the SQLite database manager and the track repository.
"""

from __future__ import annotations

import aiosqlite
import pytest
from pydantic import ValidationError as PydanticValidationError

from tunebox.config.settings import DatabaseSettings
from tunebox.domain.shared.constants import LibraryConstants
from tunebox.infrastructure.persistence.database import Database


class TestDatabase:
    """Tests for the Database manager."""

    def test_url_prefixes_are_stripped(self):
        assert Database("sqlite:///data/library.db").db_path == "data/library.db"
        assert Database("sqlite://:memory:").db_path == ":memory:"
        assert Database("plain.db").db_path == "plain.db"

    def test_is_memory(self):
        assert Database(":memory:").is_memory
        assert not Database("library.db").is_memory

    async def test_initialize_creates_songs_table(self, in_memory_database):
        rows = await in_memory_database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'songs'"
        )

        assert len(rows) == 1

    async def test_execute_returns_lastrowid(self, in_memory_database):
        first = await in_memory_database.execute(
            "INSERT INTO songs (title, artist, url) VALUES (?, ?, ?)", ("A", "B", "a.mp3")
        )
        second = await in_memory_database.execute(
            "INSERT INTO songs (title, artist, url) VALUES (?, ?, ?)", ("C", "D", "c.mp3")
        )

        assert second == first + 1

    async def test_fetch_one_missing_row(self, in_memory_database):
        assert await in_memory_database.fetch_one("SELECT * FROM songs WHERE id = ?", (99,)) is None

    async def test_file_database_creates_parent_dir(self, tmp_path):
        """Should create the directory holding a file database."""
        db_file = tmp_path / "nested" / "library.db"
        db = Database(f"sqlite:///{db_file}", DatabaseSettings())

        await db.initialize()
        await db.close()

        assert db_file.exists()

    async def test_legacy_table_gets_created_at(self, tmp_path):
        """Libraries created without created_at should be migrated in place."""
        db_file = tmp_path / "legacy.db"
        async with aiosqlite.connect(db_file) as conn:
            await conn.execute(
                "CREATE TABLE songs (id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "title TEXT NOT NULL, artist TEXT NOT NULL, cover TEXT, url TEXT NOT NULL)"
            )
            await conn.execute(
                "INSERT INTO songs (title, artist, url) VALUES ('Old', 'Band', 'old.mp3')"
            )
            await conn.commit()

        db = Database(str(db_file))
        await db.initialize()
        columns = await db.fetch_all("PRAGMA table_info(songs)")
        await db.close()

        assert "created_at" in {column["name"] for column in columns}

    async def test_transaction_rolls_back(self, in_memory_database):
        with pytest.raises(RuntimeError):
            async with in_memory_database.transaction() as conn:
                await conn.execute(
                    "INSERT INTO songs (title, artist, url) VALUES ('X', 'Y', 'x.mp3')"
                )
                raise RuntimeError("abort")

        row = await in_memory_database.fetch_one("SELECT COUNT(*) AS total FROM songs")
        assert row["total"] == 0


class TestSQLiteTrackRepository:
    """Tests for SQLiteTrackRepository."""

    async def test_add_and_list(self, track_repository, tmp_path):
        """Should assign an id and resolve the stored name inside the uploads dir."""
        track = await track_repository.add(
            title="Intro",
            artist="Band",
            cover_url=LibraryConstants.DEFAULT_COVER_URL,
            stored_name="1700000000000-42.mp3",
        )

        assert await track_repository.list_all() == [track]
        assert track.audio_url == str(tmp_path / "uploads" / "1700000000000-42.mp3")

    async def test_list_all_most_recent_first(self, track_repository):
        for title in ("first", "second", "third"):
            await track_repository.add(
                title=title, artist="Band", cover_url="", stored_name=f"{title}.mp3"
            )

        tracks = await track_repository.list_all()

        assert [t.title for t in tracks] == ["third", "second", "first"]

    async def test_absolute_urls_are_kept(self, track_repository):
        track = await track_repository.add(
            title="Remote",
            artist="Band",
            cover_url="",
            stored_name="https://cdn.example.com/remote.mp3",
        )

        assert track.audio_url == "https://cdn.example.com/remote.mp3"

    async def test_missing_artist_and_cover_use_defaults(self, track_repository, in_memory_database):
        """Rows written by older tools may lack artist or cover."""
        await in_memory_database.execute(
            "INSERT INTO songs (title, artist, cover, url) VALUES (?, ?, ?, ?)",
            ("Bare", "", None, "bare.mp3"),
        )

        (track,) = await track_repository.list_all()

        assert track.artist == LibraryConstants.DEFAULT_ARTIST
        assert track.cover_url == LibraryConstants.DEFAULT_COVER_URL

    async def test_exists_by_stored_name(self, track_repository):
        await track_repository.add(title="A", artist="B", cover_url="", stored_name="a.mp3")

        assert await track_repository.exists_by_stored_name("a.mp3")
        assert not await track_repository.exists_by_stored_name("b.mp3")

    async def test_absolute_paths_are_kept(self, track_repository, tmp_path):
        """Files imported from outside the uploads directory are played in place."""
        path = str(tmp_path / "Music" / "song.mp3")

        track = await track_repository.add(title="Song", artist="Band", cover_url="", stored_name=path)

        assert track.audio_url == path

    async def test_invalid_track_is_rolled_back(self, track_repository):
        """A row that cannot be turned into a Track must not be left behind."""
        with pytest.raises(PydanticValidationError):
            await track_repository.add(
                title="t" * 600, artist="Band", cover_url="", stored_name="long.mp3"
            )

        assert await track_repository.list_all() == []
        assert not await track_repository.exists_by_stored_name("long.mp3")
