"""Port interface for the audio output primitive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

TimeUpdateCallback = Callable[[float, float], None]
MetadataCallback = Callable[[float], None]
EndedCallback = Callable[[], Awaitable[None]]
ErrorCallback = Callable[[str], Awaitable[None]]


class MediaEngine(ABC):
    """Interface for the engine that decodes and outputs the bound track.

    Only ``play`` is awaited by the playback controller. ``bind``, ``pause``
    and ``seek`` are fire-and-forget: they return immediately and any effect
    is reported later through the event callbacks.
    """

    @abstractmethod
    def bind(self, audio_url: str) -> None:
        """Point the engine at a new audio source, discarding the previous one."""
        ...

    @abstractmethod
    async def play(self) -> bool:
        """Start or resume output; False when the engine refuses to start."""
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the audio source and any background work."""
        ...

    @abstractmethod
    def set_event_callbacks(
        self,
        *,
        on_time_update: TimeUpdateCallback,
        on_loaded_metadata: MetadataCallback,
        on_ended: EndedCallback,
        on_error: ErrorCallback,
    ) -> None:
        """Register the handlers for time updates, metadata, track end and faults."""
        ...
