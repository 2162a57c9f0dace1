"""Search view: an order-preserving filtered projection of the catalog.

The view is never maintained incrementally. Callers recompute it with
:func:`filter_catalog` whenever the query or the catalog changes, and every
row remembers the catalog position it was taken from so that a selection made
through the view always lands on the right catalog index.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from tunebox.domain.catalog.entities import Track
from tunebox.domain.shared.exceptions import InvalidIndexError


@dataclass(frozen=True, slots=True)
class SearchEntry:
    """A visible row: the track and its position in the catalog at derivation time."""

    track: Track
    original_index: int


@dataclass(frozen=True)
class SearchView:
    query: str
    entries: tuple[SearchEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SearchEntry]:
        return iter(self.entries)

    def __getitem__(self, position: int) -> SearchEntry:
        return self.entries[position]

    @property
    def is_filtered(self) -> bool:
        return bool(self.query)

    def resolve(self, position: int) -> int:
        """Map a visible row to its catalog index."""
        if not 0 <= position < len(self.entries):
            raise InvalidIndexError(position, len(self.entries))
        return self.entries[position].original_index


def normalize_query(query: str | None) -> str:
    return query or ""


def filter_catalog(catalog: Sequence[Track], query: str | None) -> SearchView:
    """Derive the visible subsequence of ``catalog`` for ``query``.

    An empty query yields the whole catalog; otherwise a track is kept when the
    query, exactly as typed, is a case-insensitive substring of its title or
    artist. Whitespace is part of the query.
    """
    normalized = normalize_query(query)
    if not normalized:
        entries = tuple(SearchEntry(track, index) for index, track in enumerate(catalog))
        return SearchView(query="", entries=entries)

    needle = normalized.lower()
    entries = tuple(
        SearchEntry(track, index) for index, track in enumerate(catalog) if track.matches(needle)
    )
    return SearchView(query=normalized, entries=entries)
