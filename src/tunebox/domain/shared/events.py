"""Domain event bus for publishing and subscribing to events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from tunebox.domain.catalog.value_objects import OptionalTrackIdField
from tunebox.domain.shared.datetime_utils import utcnow
from tunebox.domain.shared.messages import LogTemplates
from tunebox.domain.shared.types import (
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    UtcDatetimeField,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


# === Playback Events ===


class TrackStartedPlaying(DomainEvent):
    track_id: OptionalTrackIdField = None
    track_title: str = ""
    catalog_index: NonNegativeInt = 0
    audio_url: str = ""


class PlaybackPaused(DomainEvent):
    track_id: OptionalTrackIdField = None
    position: NonNegativeFloat = 0.0


class PlaybackResumed(DomainEvent):
    track_id: OptionalTrackIdField = None
    position: NonNegativeFloat = 0.0


class PlaybackRejected(DomainEvent):
    track_id: OptionalTrackIdField = None
    catalog_index: NonNegativeInt = 0


class PlaybackStopped(DomainEvent):
    track_id: OptionalTrackIdField = None
    reason: str = ""


class QueueExhausted(DomainEvent):
    last_track_id: OptionalTrackIdField = None
    last_track_title: str = ""


class EngineFaulted(DomainEvent):
    track_id: OptionalTrackIdField = None
    reason: str = ""


# === Catalog Events ===


class CatalogLoaded(DomainEvent):
    track_count: NonNegativeInt = 0
    source: str = ""


class TrackUploaded(DomainEvent):
    track_id: OptionalTrackIdField = None
    track_title: str = ""
    artist: str = ""


# === Event Bus ===


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, event_type.__name__)
            return

        logger.debug(LogTemplates.EVENT_PUBLISHING, event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug(LogTemplates.EVENT_CLEARED)


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get or create the process-wide event bus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Reset the global event bus (for testing)."""
    global _event_bus
    if _event_bus is not None:
        _event_bus.clear()
    _event_bus = None
