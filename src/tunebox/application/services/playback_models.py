"""DTOs for the playback controller."""

from __future__ import annotations

from pydantic import BaseModel

from ...domain.catalog.entities import Track
from ...domain.playback.value_objects import RepeatMode, TransportState
from ...domain.shared.datetime_utils import format_clock
from ...domain.shared.types import CatalogIndex, NonNegativeFloat, NonNegativeInt


class PlayerSnapshot(BaseModel):
    """Read-only view of the player for the UI layer."""

    current_track: Track | None
    current_index: CatalogIndex
    transport: TransportState
    shuffle: bool
    repeat_mode: RepeatMode
    position: NonNegativeFloat
    duration: NonNegativeFloat
    query: str
    visible_count: NonNegativeInt
    catalog_length: NonNegativeInt

    @property
    def progress_label(self) -> str:
        return f"{format_clock(self.position)} / {format_clock(self.duration)}"

    @property
    def is_filtered(self) -> bool:
        return bool(self.query)
