"""
Catalog Domain Repository Interfaces

Abstract base classes defining the contracts for the local track library.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from tunebox.domain.catalog.entities import Track


class TrackRepository(ABC):
    """Abstract repository for locally stored tracks.

    Rows keep the stored file name (or an absolute path or URL); implementations
    turn it into a playable ``audio_url`` when building ``Track`` objects.
    """

    @abstractmethod
    async def list_all(self) -> list[Track]:
        """Return every track, most recently added first."""
        ...

    @abstractmethod
    async def add(self, *, title: str, artist: str, cover_url: str, stored_name: str) -> Track:
        """Insert a new track and return it with its assigned id."""
        ...

    @abstractmethod
    async def exists_by_stored_name(self, stored_name: str) -> bool:
        """Check whether a file name (or URL) is already in the library."""
        ...
