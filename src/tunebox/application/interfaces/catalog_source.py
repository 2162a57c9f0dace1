"""Port interface for where the track catalog comes from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.catalog.entities import Track


class CatalogSource(ABC):
    """Interface for listing tracks and adding uploaded ones."""

    name: str = "catalog"

    @abstractmethod
    async def fetch_catalog(self) -> list["Track"]:
        """Return the catalog, most recent first.

        Raises:
            CatalogUnavailableError: On transport, storage or parse errors.
        """
        ...

    @abstractmethod
    async def upload_track(
        self, path: Path, *, title: str | None = None, artist: str | None = None
    ) -> "Track":
        """Store a local audio file and return the resulting catalog track.

        Raises:
            UploadFailedError: If the file is rejected or the upload fails.
        """
        ...

    async def close(self) -> None:
        """Release network or storage resources."""
        return None
