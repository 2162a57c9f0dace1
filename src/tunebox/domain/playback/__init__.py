"""
Playback Bounded Context

Transport state, repeat/shuffle flags and the track-advance rules.
"""

from tunebox.domain.playback.entities import PlaybackSession
from tunebox.domain.playback.services import PlaybackDomainService
from tunebox.domain.playback.value_objects import (
    CatalogReconciliation,
    RepeatMode,
    StopReason,
    TransportState,
)

__all__ = [
    # Entities
    "PlaybackSession",
    # Value Objects
    "TransportState",
    "RepeatMode",
    "StopReason",
    "CatalogReconciliation",
    # Services
    "PlaybackDomainService",
]
