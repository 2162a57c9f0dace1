"""Plain-text rendering of catalog rows and player status."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tunebox.domain.playback.value_objects import RepeatMode, TransportState

if TYPE_CHECKING:
    from tunebox.application.services.playback_models import PlayerSnapshot
    from tunebox.domain.catalog.search import SearchEntry, SearchView

TRANSPORT_LABELS = {
    TransportState.PLAYING: "playing",
    TransportState.PAUSED: "paused",
    TransportState.STOPPED: "stopped",
}

REPEAT_LABELS = {
    RepeatMode.OFF: "off",
    RepeatMode.ALL: "all",
    RepeatMode.ONE: "one",
}


def format_row(position: int, entry: SearchEntry, current_index: int) -> str:
    """One numbered row; ``position`` is the visible row the ``select`` command takes."""
    marker = ">" if entry.original_index == current_index else " "
    return f"{marker} {position + 1:>3}. {entry.track.title} - {entry.track.artist}"


def format_view(view: SearchView, current_index: int) -> str:
    if not len(view):
        return f'No tracks match "{view.query}".' if view.is_filtered else "The catalog is empty."
    return "\n".join(format_row(position, entry, current_index) for position, entry in enumerate(view))


def format_status(snapshot: PlayerSnapshot) -> str:
    track = snapshot.current_track
    title = track.display_title if track else "nothing selected"
    flags = (
        f"shuffle {'on' if snapshot.shuffle else 'off'}, "
        f"repeat {REPEAT_LABELS[snapshot.repeat_mode]}"
    )
    line = f"[{TRANSPORT_LABELS[snapshot.transport]}] {title}  {snapshot.progress_label}  ({flags})"
    if snapshot.is_filtered:
        line += f'\nsearch "{snapshot.query}": {snapshot.visible_count} of {snapshot.catalog_length}'
    return line
