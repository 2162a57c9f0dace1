"""Catalog Application Service - loads the catalog and adds uploaded tracks."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from ...domain.playback.value_objects import CatalogReconciliation, StopReason
from ...domain.shared.events import (
    CatalogLoaded,
    EventBus,
    PlaybackStopped,
    TrackUploaded,
    get_event_bus,
)
from ...domain.shared.exceptions import (
    BusinessRuleViolationError,
    CatalogUnavailableError,
    UploadFailedError,
)
from ...domain.shared.messages import LogTemplates
from .catalog_models import CatalogLoadResult, UploadResult

if TYPE_CHECKING:
    from ...domain.catalog.entities import Track
    from ..interfaces.catalog_source import CatalogSource
    from .playback_controller import PlaybackController

logger = logging.getLogger(__name__)


class CatalogApplicationService:
    """Keeps a player's catalog in sync with its source."""

    def __init__(
        self,
        *,
        catalog_source: CatalogSource,
        playback_controller: PlaybackController,
        event_bus: EventBus | None = None,
    ) -> None:
        self._source = catalog_source
        self._controller = playback_controller
        self._event_bus = event_bus or get_event_bus()

    async def load(self) -> CatalogLoadResult:
        """Fetch the catalog and install it; an unreachable source leaves it empty."""
        logger.info(LogTemplates.CATALOG_FETCHING, self._source.name)
        try:
            tracks = await self._source.fetch_catalog()
        except CatalogUnavailableError as e:
            logger.error(LogTemplates.CATALOG_UNAVAILABLE, e.message)
            await self._install(())
            await self._event_bus.publish(CatalogLoaded(track_count=0, source=self._source.name))
            return CatalogLoadResult(success=False, message=e.message)

        reconciliation = await self._install(tracks)
        count = len(self._controller.catalog)
        logger.info(LogTemplates.CATALOG_FETCHED, count, self._source.name)
        await self._event_bus.publish(CatalogLoaded(track_count=count, source=self._source.name))

        return CatalogLoadResult(
            success=True,
            track_count=count,
            current_index=reconciliation.current_index,
            track_lost=reconciliation.track_lost,
        )

    async def _install(self, tracks: Iterable[Track]) -> CatalogReconciliation:
        previous_track = self._controller.current_track
        was_active = self._controller.transport.is_active
        reconciliation = self._controller.replace_catalog(tracks)
        if reconciliation.track_lost and was_active and previous_track is not None:
            await self._event_bus.publish(
                PlaybackStopped(
                    track_id=previous_track.id, reason=StopReason.CATALOG_CHANGED.value
                )
            )
        return reconciliation

    async def upload(
        self, path: Path | str, *, title: str | None = None, artist: str | None = None
    ) -> UploadResult:
        """Upload a local file and put the new track at the front of the catalog."""
        file_path = Path(path)
        logger.info(
            LogTemplates.UPLOAD_STARTED, file_path.name, title or file_path.stem, artist or "-"
        )
        try:
            track = await self._source.upload_track(file_path, title=title, artist=artist)
            self._controller.append_track(track)
        except (UploadFailedError, BusinessRuleViolationError) as e:
            logger.warning(LogTemplates.UPLOAD_FAILED, file_path.name, e.message)
            return UploadResult(
                success=False,
                catalog_length=len(self._controller.catalog),
                message=e.message,
            )

        logger.info(LogTemplates.UPLOAD_COMPLETED, track.title, track.id)
        await self._event_bus.publish(
            TrackUploaded(track_id=track.id, track_title=track.title, artist=track.artist)
        )
        return UploadResult(
            success=True,
            track=track,
            catalog_length=len(self._controller.catalog),
            message=f"Added: {track.display_title}",
        )

    async def close(self) -> None:
        await self._source.close()
