"""SQLite repository implementations."""

from tunebox.infrastructure.persistence.repositories.track_repository import (
    SQLiteTrackRepository,
)

__all__ = [
    "SQLiteTrackRepository",
]
