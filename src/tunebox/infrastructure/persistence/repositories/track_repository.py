"""SQLite implementation of the local track library."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tunebox.domain.catalog.entities import Track
from tunebox.domain.catalog.repository import TrackRepository
from tunebox.domain.catalog.value_objects import TrackId
from tunebox.domain.shared.constants import DatabaseColumns, DatabaseTables, LibraryConstants
from tunebox.domain.shared.datetime_utils import UtcDateTime
from tunebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteTrackRepository(TrackRepository):
    """Rows store a file name inside ``uploads_dir``, an absolute path or an absolute URL."""

    def __init__(self, database: Database, uploads_dir: Path | str) -> None:
        self._db = database
        self._uploads_dir = Path(uploads_dir)

    async def list_all(self) -> list[Track]:
        rows = await self._db.fetch_all(
            f"""
            SELECT * FROM {DatabaseTables.SONGS}
            ORDER BY {DatabaseColumns.CREATED_AT} DESC, {DatabaseColumns.ID} DESC
            """
        )
        return [self._row_to_track(row) for row in rows]

    async def add(self, *, title: str, artist: str, cover_url: str, stored_name: str) -> Track:
        # A row that cannot become a Track is rolled back with the transaction
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                f"""
                INSERT INTO {DatabaseTables.SONGS} (
                    {DatabaseColumns.TITLE}, {DatabaseColumns.ARTIST}, {DatabaseColumns.COVER},
                    {DatabaseColumns.URL}, {DatabaseColumns.CREATED_AT}
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (title, artist, cover_url, stored_name, UtcDateTime.now().iso),
            )
            track = Track(
                id=TrackId.from_raw(cursor.lastrowid),
                title=title,
                artist=artist,
                cover_url=cover_url,
                audio_url=self._resolve_audio_url(stored_name),
            )
        logger.debug(LogTemplates.TRACK_INSERTED, stored_name, track.id)
        return track

    async def exists_by_stored_name(self, stored_name: str) -> bool:
        row = await self._db.fetch_one(
            f"SELECT 1 FROM {DatabaseTables.SONGS} WHERE {DatabaseColumns.URL} = ? LIMIT 1",
            (stored_name,),
        )
        return row is not None

    def _resolve_audio_url(self, stored_name: str) -> str:
        if stored_name.startswith(("http://", "https://")):
            return stored_name
        if Path(stored_name).is_absolute():
            return stored_name
        return str(self._uploads_dir / stored_name)

    def _row_to_track(self, row: dict[str, Any]) -> Track:
        return Track(
            id=TrackId.from_raw(row[DatabaseColumns.ID]),
            title=row[DatabaseColumns.TITLE],
            artist=row.get(DatabaseColumns.ARTIST) or LibraryConstants.DEFAULT_ARTIST,
            cover_url=row.get(DatabaseColumns.COVER) or LibraryConstants.DEFAULT_COVER_URL,
            audio_url=self._resolve_audio_url(row[DatabaseColumns.URL]),
        )
