"""Core domain entities for the playback bounded context."""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from tunebox.domain.catalog.entities import Track
from tunebox.domain.catalog.services import CatalogDomainService
from tunebox.domain.playback.value_objects import (
    CatalogReconciliation,
    RepeatMode,
    TransportState,
)
from tunebox.domain.shared.exceptions import (
    InvalidIndexError,
    InvalidOperationError,
    ValidationError,
)
from tunebox.domain.shared.messages import ErrorMessages
from tunebox.domain.shared.types import CatalogIndex, Seconds


def _finite_or_zero(value: float) -> float:
    if value is None or math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return float(value)


class PlaybackSession(BaseModel):
    """Aggregate root holding the transport state of one player instance.

    The session only records state. Talking to the media engine is the job
    of the application layer, which calls these methods before and after
    issuing engine commands.
    """

    model_config = ConfigDict(strict=True)

    catalog: tuple[Track, ...] = ()
    current_index: CatalogIndex = -1
    transport: TransportState = TransportState.STOPPED
    shuffle: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    position: Seconds = 0.0
    duration: Seconds = 0.0

    @property
    def catalog_length(self) -> int:
        return len(self.catalog)

    @property
    def current_track(self) -> Track | None:
        if 0 <= self.current_index < len(self.catalog):
            return self.catalog[self.current_index]
        return None

    @property
    def has_selection(self) -> bool:
        return self.current_track is not None

    @property
    def is_playing(self) -> bool:
        return self.transport == TransportState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.transport == TransportState.PAUSED

    @property
    def is_stopped(self) -> bool:
        return self.transport == TransportState.STOPPED

    def validate_index(self, index: int) -> None:
        if not 0 <= index < len(self.catalog):
            raise InvalidIndexError(index, len(self.catalog))

    def transition_to(self, new_state: TransportState) -> None:
        """Transition to a new transport state."""
        if not self.transport.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.transport.value,
                message=f"Cannot transition from {self.transport.value} to {new_state.value}",
            )
        self.transport = new_state

    def begin_track(self, index: int) -> Track:
        """Select ``index`` and mark it as playing from the top."""
        self.validate_index(index)
        self.current_index = index
        self.position = 0.0
        self.duration = 0.0
        self.transport = TransportState.PLAYING
        return self.catalog[index]

    def pause(self) -> None:
        self.transition_to(TransportState.PAUSED)

    def resume(self) -> None:
        if not self.has_selection:
            raise InvalidOperationError(
                operation="resume",
                current_state=self.transport.value,
                message=ErrorMessages.NO_TRACK_SELECTED,
            )
        self.transition_to(TransportState.PLAYING)

    def reject_playback(self) -> None:
        """The engine refused to start; keep the index and position, drop to paused."""
        self.transport = TransportState.PAUSED

    def stop(self) -> None:
        """Stop without moving the selection."""
        self.transport = TransportState.STOPPED
        self.position = 0.0

    def restart(self) -> None:
        self.position = 0.0

    def clamp_seek(self, seconds: float) -> float:
        if seconds is None or math.isnan(seconds) or math.isinf(seconds):
            raise ValidationError(ErrorMessages.INVALID_SEEK, field="seconds")
        return max(0.0, min(float(seconds), self.duration))

    def seek(self, seconds: float) -> float:
        """Move the position optimistically and return the clamped target."""
        self.position = self.clamp_seek(seconds)
        return self.position

    def update_progress(self, position: float, duration: float) -> None:
        self.duration = _finite_or_zero(duration)
        current = _finite_or_zero(position)
        self.position = min(current, self.duration) if self.duration > 0 else current

    def update_duration(self, duration: float) -> None:
        self.duration = _finite_or_zero(duration)
        if self.duration > 0 and self.position > self.duration:
            self.position = self.duration

    def set_shuffle(self, enabled: bool) -> None:
        self.shuffle = enabled

    def cycle_repeat(self) -> RepeatMode:
        """Advance the repeat mode and return the new mode."""
        self.repeat_mode = self.repeat_mode.next_mode()
        return self.repeat_mode

    def replace_catalog(self, catalog: Sequence[Track]) -> CatalogReconciliation:
        """Install a new catalog, following the current track by identity."""
        previous_track = self.current_track
        previous_index = self.current_index
        tracks = tuple(catalog)
        self.catalog = tracks

        if previous_track is not None:
            located = CatalogDomainService.locate(tracks, previous_track.id)
            if located is not None:
                self.current_index = located
                return CatalogReconciliation(previous_index, located, track_lost=False)

        self.current_index = 0 if tracks else -1
        self.transport = TransportState.STOPPED
        self.position = 0.0
        self.duration = 0.0
        return CatalogReconciliation(
            previous_index, self.current_index, track_lost=previous_track is not None
        )

    def prepend_track(self, track: Track) -> None:
        """Add a freshly uploaded track in front; the current track keeps playing."""
        self.catalog = CatalogDomainService.prepend(self.catalog, track)
        if self.current_index >= 0:
            self.current_index += 1
        else:
            self.current_index = 0
