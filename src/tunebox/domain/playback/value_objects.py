"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransportState(Enum):
    """Transport state with enforced transitions.

    State transitions:
    - STOPPED -> PLAYING (select / play from the top)
    - PLAYING -> PAUSED (pause, or the engine rejected play)
    - PAUSED -> PLAYING (resume)
    - PLAYING -> STOPPED (end of catalog, engine fault, catalog change)
    - PAUSED -> STOPPED (catalog change)

    Selecting a track enters PLAYING from any state.
    """

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: TransportState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            TransportState.STOPPED: {TransportState.PLAYING},
            TransportState.PLAYING: {TransportState.PAUSED, TransportState.STOPPED},
            TransportState.PAUSED: {TransportState.PLAYING, TransportState.STOPPED},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {TransportState.PLAYING, TransportState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == TransportState.PLAYING


class RepeatMode(Enum):
    """End-of-track auto-advance policy."""

    OFF = "off"
    ALL = "all"  # Wrap around after the last track
    ONE = "one"  # Replay the current track when it ends

    def next_mode(self) -> RepeatMode:
        """Cycle OFF -> ALL -> ONE -> OFF."""
        modes = list(RepeatMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]


class StopReason(Enum):
    """Reasons playback can end up stopped."""

    END_OF_CATALOG = "end_of_catalog"
    ENGINE_FAULT = "engine_fault"
    CATALOG_CHANGED = "catalog_changed"


@dataclass(frozen=True)
class CatalogReconciliation:
    """Outcome of swapping the catalog under an active session."""

    previous_index: int
    current_index: int
    track_lost: bool

    @property
    def moved(self) -> bool:
        return not self.track_lost and self.previous_index != self.current_index
