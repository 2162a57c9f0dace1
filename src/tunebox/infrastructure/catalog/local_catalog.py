"""Catalog source backed by the local SQLite library and uploads directory."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import secrets
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from tunebox.application.interfaces.catalog_source import CatalogSource
from tunebox.domain.catalog.entities import Track
from tunebox.domain.shared.constants import LibraryConstants
from tunebox.domain.shared.datetime_utils import UtcDateTime
from tunebox.domain.shared.exceptions import CatalogUnavailableError, UploadFailedError
from tunebox.domain.shared.messages import ErrorMessages, LogTemplates
from tunebox.domain.shared.types import BYTES_PER_MB

if TYPE_CHECKING:
    from tunebox.config.settings import LibrarySettings
    from tunebox.domain.catalog.repository import TrackRepository

logger = logging.getLogger(__name__)


def stored_file_name(source: Path) -> str:
    """Unique name for an uploaded file: ``<epoch-ms>-<random><ext>``."""
    extension = source.suffix
    if not extension:
        mime_type = mimetypes.guess_type(source.name)[0] or ""
        extension = LibraryConstants.MIME_EXTENSIONS.get(
            mime_type, LibraryConstants.FALLBACK_EXTENSION
        )
    return f"{UtcDateTime.now().unix_millis}-{secrets.randbelow(10**9)}{extension}"


class LocalLibraryCatalogSource(CatalogSource):
    """Lists the local library and copies uploads into the uploads directory."""

    name = "local"

    def __init__(self, *, track_repository: TrackRepository, settings: LibrarySettings) -> None:
        self._repository = track_repository
        self._settings = settings
        self._uploads_dir = Path(settings.uploads_dir)

    async def fetch_catalog(self) -> list[Track]:
        try:
            return await self._repository.list_all()
        except (aiosqlite.Error, PydanticValidationError) as e:
            raise CatalogUnavailableError(
                self.name, ErrorMessages.CATALOG_DATABASE.format(detail=e)
            ) from e

    async def upload_track(
        self, path: Path, *, title: str | None = None, artist: str | None = None
    ) -> Track:
        if not path.is_file():
            raise UploadFailedError(path.name, ErrorMessages.UPLOAD_FILE_NOT_FOUND.format(path=path))

        size = path.stat().st_size
        limit_mb = self._settings.max_upload_mb
        if size > limit_mb * BYTES_PER_MB:
            raise UploadFailedError(
                path.name,
                ErrorMessages.UPLOAD_TOO_LARGE.format(size_mb=size / BYTES_PER_MB, limit_mb=limit_mb),
            )

        stored_name = stored_file_name(path)
        target = self._uploads_dir / stored_name
        try:
            await asyncio.to_thread(self._copy, path, target)
        except OSError as e:
            raise UploadFailedError(path.name, ErrorMessages.UPLOAD_TRANSPORT.format(detail=e)) from e

        try:
            return await self._repository.add(
                title=title or path.stem,
                artist=artist or self._settings.default_artist,
                cover_url=self._settings.default_cover_url,
                stored_name=stored_name,
            )
        except aiosqlite.Error as e:
            target.unlink(missing_ok=True)
            raise UploadFailedError(
                path.name, ErrorMessages.CATALOG_DATABASE.format(detail=e)
            ) from e
        except PydanticValidationError as e:
            target.unlink(missing_ok=True)
            raise UploadFailedError(
                path.name, ErrorMessages.UPLOAD_INVALID_TRACK.format(detail=e)
            ) from e

    @staticmethod
    def _copy(source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        logger.debug(LogTemplates.UPLOAD_FILE_COPIED, source, target)
