"""Library Import Service - registers audio files from a directory in the local library."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from ...domain.shared.constants import LibraryConstants
from ...domain.shared.messages import LogTemplates
from .catalog_models import ImportResult

if TYPE_CHECKING:
    from ...config.settings import LibrarySettings
    from ...domain.catalog.repository import TrackRepository

logger = logging.getLogger(__name__)


def _scan_audio_files(directory: Path, extensions: tuple[str, ...]) -> list[Path]:
    return sorted(
        entry
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() in extensions
    )


class LibraryImporter:
    """Adds every audio file of a directory that is not in the library yet.

    Files inside the uploads directory are stored by name, like uploads; files
    anywhere else are stored by absolute path so they stay playable in place.
    The file stem becomes the title; artist and cover fall back to the library
    defaults.
    """

    def __init__(
        self,
        *,
        track_repository: TrackRepository,
        settings: LibrarySettings,
    ) -> None:
        self._repository = track_repository
        self._settings = settings

    async def import_directory(self, directory: Path | str | None = None) -> ImportResult:
        source_dir = Path(directory or self._settings.uploads_dir)
        logger.info(LogTemplates.IMPORT_STARTED, source_dir)

        if not source_dir.is_dir():
            logger.warning(LogTemplates.IMPORT_DIRECTORY_MISSING, source_dir)
            return ImportResult()

        extensions = self._settings.audio_extensions or LibraryConstants.AUDIO_EXTENSIONS
        files = await asyncio.to_thread(_scan_audio_files, source_dir, extensions)

        in_uploads = source_dir.resolve() == Path(self._settings.uploads_dir).resolve()

        added_titles: list[str] = []
        skipped = 0
        for file in files:
            stored_name = file.name if in_uploads else str(file.resolve())
            if await self._repository.exists_by_stored_name(stored_name):
                skipped += 1
                continue

            try:
                await self._repository.add(
                    title=file.stem,
                    artist=self._settings.default_artist,
                    cover_url=self._settings.default_cover_url,
                    stored_name=stored_name,
                )
            except PydanticValidationError as e:
                logger.warning(LogTemplates.IMPORT_FILE_REJECTED, file.name, e.error_count())
                skipped += 1
                continue
            added_titles.append(file.stem)
            logger.info(LogTemplates.IMPORT_ADDED, file.name)

        logger.info(LogTemplates.IMPORT_COMPLETED, len(added_titles), skipped)
        return ImportResult(added=len(added_titles), skipped=skipped, added_titles=added_titles)
