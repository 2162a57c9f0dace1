"""
Catalog Domain Services

Pure operations over catalog values. A catalog is an ordered tuple of
tracks; every change produces a new tuple so readers never observe a
half-applied mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from tunebox.domain.catalog.entities import Track
from tunebox.domain.catalog.value_objects import TrackId
from tunebox.domain.shared.exceptions import BusinessRuleViolationError
from tunebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

Catalog = tuple[Track, ...]


class CatalogDomainService:
    """Domain service for catalog identity and ordering rules."""

    @staticmethod
    def locate(catalog: Sequence[Track], track_id: TrackId) -> int | None:
        """Find the catalog position of a track by identity.

        Args:
            catalog: The catalog to search.
            track_id: Identifier of the track.

        Returns:
            The index of the track, or None if it is not in the catalog.
        """
        for index, track in enumerate(catalog):
            if track.id == track_id:
                return index
        return None

    @staticmethod
    def contains(catalog: Sequence[Track], track_id: TrackId) -> bool:
        return any(track.id == track_id for track in catalog)

    @classmethod
    def prepend(cls, catalog: Sequence[Track], track: Track) -> Catalog:
        """Return a new catalog with ``track`` in front (most recent first).

        Args:
            catalog: The current catalog.
            track: The freshly uploaded track.

        Returns:
            The new catalog value.

        Raises:
            BusinessRuleViolationError: If a track with the same id already exists.
        """
        if cls.contains(catalog, track.id):
            raise BusinessRuleViolationError(
                rule="NO_DUPLICATES",
                message=ErrorMessages.DUPLICATE_TRACK.format(title=track.title, track_id=track.id),
            )
        return (track, *catalog)

    @staticmethod
    def deduplicate(tracks: Iterable[Track]) -> Catalog:
        """Build a catalog value, keeping the first occurrence of each id.

        Args:
            tracks: Tracks in source order.

        Returns:
            The catalog with later duplicates dropped.
        """
        seen: set[TrackId] = set()
        unique: list[Track] = []
        for track in tracks:
            if track.id in seen:
                logger.warning(LogTemplates.CATALOG_DUPLICATE_DROPPED, track.id, track.title)
                continue
            seen.add(track.id)
            unique.append(track)
        return tuple(unique)
