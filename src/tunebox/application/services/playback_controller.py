"""Playback Controller - owns one player instance and drives its media engine."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...config.settings import PlaybackSettings
from ...domain.catalog.entities import Track
from ...domain.catalog.search import SearchView, filter_catalog, normalize_query
from ...domain.catalog.services import CatalogDomainService
from ...domain.playback.entities import PlaybackSession
from ...domain.playback.services import PlaybackDomainService
from ...domain.playback.value_objects import (
    CatalogReconciliation,
    RepeatMode,
    StopReason,
    TransportState,
)
from ...domain.shared.events import (
    DomainEvent,
    EngineFaulted,
    EventBus,
    PlaybackPaused,
    PlaybackRejected,
    PlaybackResumed,
    PlaybackStopped,
    QueueExhausted,
    TrackStartedPlaying,
    get_event_bus,
)
from ...domain.shared.messages import LogTemplates
from .playback_models import PlayerSnapshot

if TYPE_CHECKING:
    from ..interfaces.media_engine import MediaEngine

logger = logging.getLogger(__name__)


class PlaybackController:
    """Single mutation entry point for a player: selection, transport and search.

    Every command that may start audio is a coroutine. The session is updated
    before the first suspension point, so the new state is observable as soon
    as the command is issued; the coroutine returns once the engine has
    reported whether ``play`` succeeded.

    Each transport command takes a new operation token. A ``play`` completion
    only applies its outcome while its token is still the latest one, so a
    late rejection can never undo a newer selection or pause.
    """

    def __init__(
        self,
        *,
        media_engine: MediaEngine,
        event_bus: EventBus | None = None,
        settings: PlaybackSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._engine = media_engine
        self._event_bus = event_bus or get_event_bus()
        self._settings = settings or PlaybackSettings()
        self._rng = rng or random.Random()

        self._session = PlaybackSession(
            shuffle=self._settings.shuffle,
            repeat_mode=RepeatMode(self._settings.repeat_mode),
        )
        self._query = ""
        self._view: SearchView = filter_catalog(self._session.catalog, self._query)
        self._op_token = 0

        self._engine.set_event_callbacks(
            on_time_update=self.on_time_update,
            on_loaded_metadata=self.on_loaded_metadata,
            on_ended=self.on_ended,
            on_error=self.on_error,
        )

    # === State access ===

    @property
    def session(self) -> PlaybackSession:
        return self._session

    @property
    def catalog(self) -> tuple[Track, ...]:
        return self._session.catalog

    @property
    def current_index(self) -> int:
        return self._session.current_index

    @property
    def current_track(self) -> Track | None:
        return self._session.current_track

    @property
    def transport(self) -> TransportState:
        return self._session.transport

    @property
    def shuffle(self) -> bool:
        return self._session.shuffle

    @property
    def repeat_mode(self) -> RepeatMode:
        return self._session.repeat_mode

    @property
    def position(self) -> float:
        return self._session.position

    @property
    def duration(self) -> float:
        return self._session.duration

    @property
    def query(self) -> str:
        return self._query

    @property
    def search_view(self) -> SearchView:
        return self._view

    def snapshot(self) -> PlayerSnapshot:
        session = self._session
        return PlayerSnapshot(
            current_track=session.current_track,
            current_index=session.current_index,
            transport=session.transport,
            shuffle=session.shuffle,
            repeat_mode=session.repeat_mode,
            position=session.position,
            duration=session.duration,
            query=self._query,
            visible_count=len(self._view),
            catalog_length=session.catalog_length,
        )

    # === Catalog ===

    def replace_catalog(self, tracks: Iterable[Track]) -> CatalogReconciliation:
        """Install a freshly fetched catalog, following the current track by id."""
        catalog = CatalogDomainService.deduplicate(tracks)
        previous_track = self._session.current_track
        was_active = self._session.transport.is_active

        result = self._session.replace_catalog(catalog)
        if result.track_lost and previous_track is not None:
            self._next_token()
            if was_active:
                self._engine.pause()
            logger.info(LogTemplates.CATALOG_TRACK_VANISHED, previous_track.id)
        elif result.moved and previous_track is not None:
            logger.debug(
                LogTemplates.CATALOG_TRACK_RELOCATED,
                previous_track.id,
                result.previous_index,
                result.current_index,
            )

        self._refresh_view()
        logger.info(LogTemplates.CATALOG_REPLACED, len(catalog), self._session.current_index)
        return result

    def append_track(self, track: Track) -> None:
        """Prepend an uploaded track; whatever is playing keeps playing."""
        self._session.prepend_track(track)
        self._refresh_view()
        logger.info(LogTemplates.CATALOG_TRACK_PREPENDED, track.title, self._session.catalog_length)

    # === Search ===

    def set_query(self, query: str) -> SearchView:
        self._query = normalize_query(query)
        self._refresh_view()
        logger.debug(
            LogTemplates.PLAYBACK_QUERY, self._query, len(self._view), self._session.catalog_length
        )
        return self._view

    def _refresh_view(self) -> None:
        self._view = filter_catalog(self._session.catalog, self._query)

    # === Transport commands ===

    async def select(self, index: int) -> None:
        """Play the track at catalog position ``index`` from the beginning.

        Raises:
            InvalidIndexError: If ``index`` is outside the catalog; nothing changes.
        """
        track = self._session.begin_track(index)
        logger.info(LogTemplates.PLAYBACK_SELECT, index, track.title)
        token = self._next_token()
        self._engine.bind(track.audio_url)
        await self._issue_play(token, track, resumed=False)

    async def select_visible(self, position: int) -> None:
        """Play the track shown at row ``position`` of the current search view."""
        await self.select(self._view.resolve(position))

    async def toggle_play(self) -> None:
        track = self._session.current_track
        if track is None:
            logger.debug(LogTemplates.PLAYBACK_NO_TRACK, "toggle_play")
            return

        if self._session.is_playing:
            self._next_token()
            self._engine.pause()
            self._session.pause()
            logger.info(LogTemplates.PLAYBACK_PAUSED, track.title, self._session.position)
            await self._publish(PlaybackPaused(track_id=track.id, position=self._session.position))
            return

        if self._session.is_paused:
            token = self._next_token()
            self._session.resume()
            await self._issue_play(token, track, resumed=True)
            return

        await self.select(self._session.current_index)

    def seek_to(self, seconds: float) -> float | None:
        """Seek within the current track; returns the clamped target."""
        if not self._session.has_selection:
            logger.debug(LogTemplates.PLAYBACK_NO_TRACK, "seek")
            return None

        target = self._session.seek(seconds)
        self._engine.seek(target)
        logger.debug(LogTemplates.PLAYBACK_SEEK, target, seconds)
        return target

    async def next(self) -> None:
        await self._advance(auto=False)

    async def previous(self) -> None:
        track = self._session.current_track
        if track is None:
            logger.debug(LogTemplates.PLAYBACK_NO_TRACK, "previous")
            return

        if PlaybackDomainService.should_restart(
            self._session.position, self._settings.restart_threshold_seconds
        ):
            self._session.restart()
            self._engine.seek(0.0)
            logger.debug(LogTemplates.PLAYBACK_RESTART, track.title)
            return

        target = PlaybackDomainService.previous_index(
            current_index=self._session.current_index,
            length=self._session.catalog_length,
        )
        if target is not None:
            await self.select(target)

    def set_shuffle(self, enabled: bool) -> None:
        self._session.set_shuffle(enabled)
        logger.debug(LogTemplates.PLAYBACK_SHUFFLE, "on" if enabled else "off")

    def cycle_repeat(self) -> RepeatMode:
        mode = self._session.cycle_repeat()
        logger.debug(LogTemplates.PLAYBACK_REPEAT, mode.value)
        return mode

    # === Engine events ===

    def on_time_update(self, position: float, duration: float) -> None:
        self._session.update_progress(position, duration)

    def on_loaded_metadata(self, duration: float) -> None:
        self._session.update_duration(duration)

    async def on_ended(self) -> None:
        track = self._session.current_track
        if track is None or self._session.is_stopped:
            logger.debug(LogTemplates.PLAYBACK_ENDED_IGNORED)
            return

        logger.info(LogTemplates.PLAYBACK_ENDED, track.title, self._session.current_index)
        await self._advance(auto=True)

    async def on_error(self, reason: str) -> None:
        track = self._session.current_track
        logger.warning(LogTemplates.PLAYBACK_ENGINE_FAULT, track.title if track else "-", reason)
        await self._publish(EngineFaulted(track_id=track.id if track else None, reason=reason))

        if track is None or self._session.is_stopped:
            return

        # A broken source on repeat-one would otherwise be retried forever.
        if self._session.repeat_mode != RepeatMode.ONE:
            await self._advance(auto=True)
            return

        self._next_token()
        self._session.stop()
        logger.info(
            LogTemplates.PLAYBACK_STOPPED, self._session.current_index, StopReason.ENGINE_FAULT.value
        )
        await self._publish(PlaybackStopped(track_id=track.id, reason=StopReason.ENGINE_FAULT.value))

    # === Internals ===

    async def _advance(self, *, auto: bool) -> None:
        length = self._session.catalog_length
        if length == 0:
            logger.debug(LogTemplates.PLAYBACK_NO_TRACK, "advance")
            return

        target = PlaybackDomainService.next_index(
            current_index=self._session.current_index,
            length=length,
            shuffle=self._session.shuffle,
            repeat_mode=self._session.repeat_mode,
            auto=auto,
            rng=self._rng,
        )
        if target is not None:
            await self.select(target)
            return

        last_track = self._session.current_track
        self._next_token()
        self._session.stop()
        logger.info(LogTemplates.PLAYBACK_QUEUE_EXHAUSTED, self._session.current_index)
        await self._publish(
            QueueExhausted(
                last_track_id=last_track.id if last_track else None,
                last_track_title=last_track.title if last_track else "",
            )
        )
        await self._publish(
            PlaybackStopped(
                track_id=last_track.id if last_track else None,
                reason=StopReason.END_OF_CATALOG.value,
            )
        )

    async def _issue_play(self, token: int, track: Track, *, resumed: bool) -> bool:
        try:
            started = await self._engine.play()
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_ENGINE_RAISED, track.title)
            started = False

        if token != self._op_token:
            logger.debug(LogTemplates.PLAYBACK_STALE_COMPLETION, token, self._op_token)
            if started and not self._session.is_playing:
                # The engine came up after a newer pause or stop; silence it again
                self._engine.pause()
            return False

        index = self._session.current_index
        if not started:
            self._session.reject_playback()
            logger.warning(LogTemplates.PLAYBACK_REJECTED, track.title, index)
            await self._publish(PlaybackRejected(track_id=track.id, catalog_index=index))
            return False

        if resumed:
            logger.info(LogTemplates.PLAYBACK_RESUMED, track.title, self._session.position)
            await self._publish(PlaybackResumed(track_id=track.id, position=self._session.position))
        else:
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, index)
            await self._publish(
                TrackStartedPlaying(
                    track_id=track.id,
                    track_title=track.title,
                    catalog_index=index,
                    audio_url=track.audio_url,
                )
            )
        return True

    def _next_token(self) -> int:
        self._op_token += 1
        return self._op_token

    async def _publish(self, event: DomainEvent) -> None:
        await self._event_bus.publish(event)

    async def close(self) -> None:
        """Invalidate in-flight completions and release the engine."""
        self._next_token()
        await self._engine.close()
