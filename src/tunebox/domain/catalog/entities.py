"""Core domain entities for the catalog bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from tunebox.domain.catalog.value_objects import TrackIdField
from tunebox.domain.shared.constants import LibraryConstants
from tunebox.domain.shared.types import NonEmptyStr, TrackTitleStr


class Track(BaseModel):
    """Immutable value object representing a playable catalog entry."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackIdField
    title: TrackTitleStr
    artist: NonEmptyStr = LibraryConstants.DEFAULT_ARTIST
    cover_url: str = LibraryConstants.DEFAULT_COVER_URL
    audio_url: NonEmptyStr

    @property
    def display_title(self) -> str:
        return f"{self.title} - {self.artist}"

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on title or artist.

        ``needle`` must already be lower-cased.
        """
        return needle in self.title.lower() or needle in self.artist.lower()
