"""Catalog source backed by the songs HTTP API."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from tunebox.application.interfaces.catalog_source import CatalogSource
from tunebox.domain.catalog.entities import Track
from tunebox.domain.shared.constants import CatalogApi, HTTPHeaders, LibraryConstants
from tunebox.domain.shared.exceptions import CatalogUnavailableError, UploadFailedError
from tunebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from tunebox.config.settings import CatalogSettings

logger = logging.getLogger(__name__)


def resolve_media_url(base_url: str, value: str) -> str:
    """Join a server-relative path such as ``/uploads/x.mp3`` onto ``base_url``."""
    if value.startswith(("http://", "https://")):
        return value
    return str(httpx.URL(base_url).join(value))


def track_from_payload(item: Any, base_url: str) -> Track:
    """Build a track from one songs API object.

    Raises:
        ValueError: If the object lacks an id, title or url.
    """
    if not isinstance(item, dict):
        raise ValueError("expected an object")

    url = item.get(CatalogApi.URL)
    if not isinstance(url, str) or not url:
        raise ValueError("missing url")
    cover = item.get(CatalogApi.COVER)
    artist = item.get(CatalogApi.ARTIST)

    return Track(
        id=item.get(CatalogApi.ID),
        title=item.get(CatalogApi.TITLE),
        artist=artist if isinstance(artist, str) and artist else LibraryConstants.DEFAULT_ARTIST,
        cover_url=resolve_media_url(base_url, cover)
        if isinstance(cover, str) and cover
        else LibraryConstants.DEFAULT_COVER_URL,
        audio_url=resolve_media_url(base_url, url),
    )


class HttpCatalogSource(CatalogSource):
    """Lists and uploads tracks through ``/api/songs``."""

    name = "http"

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.base_url
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=settings.request_timeout_s,
            headers={HTTPHeaders.ACCEPT: HTTPHeaders.JSON},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_catalog(self) -> list[Track]:
        try:
            response = await self._client.get(CatalogApi.SONGS_PATH)
        except httpx.HTTPError as e:
            raise CatalogUnavailableError(
                self.name, ErrorMessages.CATALOG_TRANSPORT.format(detail=e)
            ) from e

        if response.is_error:
            raise CatalogUnavailableError(
                self.name, ErrorMessages.CATALOG_HTTP_STATUS.format(status=response.status_code)
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogUnavailableError(
                self.name, ErrorMessages.CATALOG_TRANSPORT.format(detail=e)
            ) from e

        if not isinstance(payload, list):
            raise CatalogUnavailableError(self.name, ErrorMessages.CATALOG_NOT_A_LIST)

        tracks: list[Track] = []
        for position, item in enumerate(payload):
            try:
                tracks.append(track_from_payload(item, self._base_url))
            except (ValueError, PydanticValidationError) as e:
                raise CatalogUnavailableError(
                    self.name,
                    ErrorMessages.CATALOG_MALFORMED_ITEM.format(position=position, detail=e),
                ) from e

        logger.debug(LogTemplates.CATALOG_FETCHED, len(tracks), self._base_url)
        return tracks

    async def upload_track(
        self, path: Path, *, title: str | None = None, artist: str | None = None
    ) -> Track:
        token = self._settings.api_token.get_secret_value()
        if not token:
            raise UploadFailedError(path.name, ErrorMessages.UPLOAD_TOKEN_REQUIRED)
        if not path.is_file():
            raise UploadFailedError(path.name, ErrorMessages.UPLOAD_FILE_NOT_FOUND.format(path=path))

        content = await asyncio.to_thread(path.read_bytes)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        data = {
            CatalogApi.FORM_TITLE: title or path.stem,
            CatalogApi.FORM_ARTIST: artist or LibraryConstants.DEFAULT_ARTIST,
        }

        try:
            response = await self._client.post(
                CatalogApi.SONGS_PATH,
                data=data,
                files={CatalogApi.FORM_AUDIO: (path.name, content, content_type)},
                headers={HTTPHeaders.AUTHORIZATION: HTTPHeaders.BEARER.format(token=token)},
            )
        except httpx.HTTPError as e:
            raise UploadFailedError(
                path.name, ErrorMessages.UPLOAD_TRANSPORT.format(detail=e)
            ) from e

        if response.is_error:
            raise UploadFailedError(
                path.name,
                ErrorMessages.UPLOAD_HTTP_STATUS.format(
                    status=response.status_code, detail=self._error_detail(response)
                ),
            )

        try:
            return track_from_payload(response.json(), self._base_url)
        except (ValueError, PydanticValidationError) as e:
            raise UploadFailedError(
                path.name, ErrorMessages.UPLOAD_BAD_RESPONSE.format(detail=e)
            ) from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and isinstance(body.get(CatalogApi.ERROR), str):
            return body[CatalogApi.ERROR]
        return response.reason_phrase

    async def close(self) -> None:
        await self._client.aclose()
