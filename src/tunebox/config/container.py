"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the player, its media engine, the catalog
source and the local library. Components are created on-demand and cached
for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.catalog_source import CatalogSource
    from ..application.interfaces.media_engine import MediaEngine
    from ..application.services.catalog_service import CatalogApplicationService
    from ..application.services.library_import import LibraryImporter
    from ..application.services.playback_controller import PlaybackController
    from ..domain.catalog.repository import TrackRepository
    from ..domain.shared.events import EventBus
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _track_repository: TrackRepository | None = None

    # Infrastructure adapters
    _catalog_source: CatalogSource | None = None
    _media_engine: MediaEngine | None = None

    # Application services
    _event_bus: EventBus | None = None
    _playback_controller: PlaybackController | None = None
    _catalog_service: CatalogApplicationService | None = None
    _library_importer: LibraryImporter | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    @property
    def uses_database(self) -> bool:
        return self.settings.catalog_backend == "local" or self._database is not None

    # === Repositories ===

    @property
    def track_repository(self) -> TrackRepository:
        """Get the local track library repository."""
        if self._track_repository is None:
            from ..infrastructure.persistence.repositories.track_repository import (
                SQLiteTrackRepository,
            )

            self._track_repository = SQLiteTrackRepository(
                self.database, self.settings.library.uploads_dir
            )
        return self._track_repository

    # === Infrastructure Adapters ===

    @property
    def catalog_source(self) -> CatalogSource:
        """Get the catalog source selected by ``catalog_backend``."""
        if self._catalog_source is None:
            if self.settings.catalog_backend == "local":
                from ..infrastructure.catalog.local_catalog import LocalLibraryCatalogSource

                self._catalog_source = LocalLibraryCatalogSource(
                    track_repository=self.track_repository,
                    settings=self.settings.library,
                )
            else:
                from ..infrastructure.catalog.http_catalog import HttpCatalogSource

                self._catalog_source = HttpCatalogSource(self.settings.catalog)
        return self._catalog_source

    @property
    def media_engine(self) -> MediaEngine:
        """Get the media engine."""
        if self._media_engine is None:
            from ..infrastructure.media.ffplay_engine import FFplayMediaEngine

            self._media_engine = FFplayMediaEngine(self.settings.media)
        return self._media_engine

    # === Application Services ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    @property
    def playback_controller(self) -> PlaybackController:
        """Get the player instance."""
        if self._playback_controller is None:
            from ..application.services.playback_controller import PlaybackController

            self._playback_controller = PlaybackController(
                media_engine=self.media_engine,
                event_bus=self.event_bus,
                settings=self.settings.playback,
            )
        return self._playback_controller

    @property
    def catalog_service(self) -> CatalogApplicationService:
        """Get the catalog application service."""
        if self._catalog_service is None:
            from ..application.services.catalog_service import CatalogApplicationService

            self._catalog_service = CatalogApplicationService(
                catalog_source=self.catalog_source,
                playback_controller=self.playback_controller,
                event_bus=self.event_bus,
            )
        return self._catalog_service

    @property
    def library_importer(self) -> LibraryImporter:
        """Get the uploads directory importer."""
        if self._library_importer is None:
            from ..application.services.library_import import LibraryImporter

            self._library_importer = LibraryImporter(
                track_repository=self.track_repository,
                settings=self.settings.library,
            )
        return self._library_importer

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        if self.uses_database:
            await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._playback_controller is not None:
            try:
                await self._playback_controller.close()
            except Exception as exc:
                logger.warning(LogTemplates.SHUTDOWN_STEP_FAILED, "playback controller", exc)
        elif self._media_engine is not None:
            try:
                await self._media_engine.close()
            except Exception as exc:
                logger.warning(LogTemplates.SHUTDOWN_STEP_FAILED, "media engine", exc)

        if self._catalog_source is not None:
            try:
                await self._catalog_source.close()
            except Exception as exc:
                logger.warning(LogTemplates.SHUTDOWN_STEP_FAILED, "catalog source", exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
