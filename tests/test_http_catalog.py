"""
Unit Tests for HttpCatalogSource

Tests for:
- Mapping songs API objects to tracks
- Catalog fetch failures
- Multipart uploads and server errors
"""

import json

import httpx
import pytest
from pydantic import SecretStr

from tunebox.config.settings import CatalogSettings
from tunebox.domain.catalog.value_objects import TrackId
from tunebox.domain.shared.constants import LibraryConstants
from tunebox.domain.shared.exceptions import CatalogUnavailableError, UploadFailedError
from tunebox.infrastructure.catalog.http_catalog import (
    HttpCatalogSource,
    resolve_media_url,
    track_from_payload,
)

BASE_URL = "http://localhost:3000"


def make_source(handler, token: str = "secret") -> HttpCatalogSource:
    settings = CatalogSettings(base_url=BASE_URL, api_token=SecretStr(token))
    return HttpCatalogSource(settings, transport=httpx.MockTransport(handler))


def song(song_id=1, title="Song", artist="Band", url="/uploads/1-1.mp3", cover=None):
    return {"id": song_id, "title": title, "artist": artist, "cover": cover, "url": url}


class TestPayloadMapping:
    """Tests for resolve_media_url and track_from_payload."""

    def test_relative_url_is_joined(self):
        assert resolve_media_url(BASE_URL, "/uploads/a.mp3") == "http://localhost:3000/uploads/a.mp3"

    def test_absolute_url_kept(self):
        assert resolve_media_url(BASE_URL, "https://cdn.example.com/a.mp3") == (
            "https://cdn.example.com/a.mp3"
        )

    def test_defaults_for_missing_artist_and_cover(self):
        """Null artist and cover should fall back to library defaults."""
        track = track_from_payload(song(artist=None), BASE_URL)

        assert track.artist == LibraryConstants.DEFAULT_ARTIST
        assert track.cover_url == LibraryConstants.DEFAULT_COVER_URL
        assert track.audio_url == "http://localhost:3000/uploads/1-1.mp3"

    def test_missing_url_rejected(self):
        with pytest.raises(ValueError):
            track_from_payload(song(url=None), BASE_URL)

    def test_not_an_object_rejected(self):
        with pytest.raises(ValueError):
            track_from_payload(["id", 1], BASE_URL)


class TestFetchCatalog:
    """Tests for HttpCatalogSource.fetch_catalog."""

    async def test_fetch_maps_songs_in_order(self):
        """Should request /api/songs and keep the server's most-recent-first order."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[song(2, "Newer"), song(1, "Older", cover="/c.png")])

        source = make_source(handler)
        tracks = await source.fetch_catalog()
        await source.close()

        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/songs"
        assert [t.title for t in tracks] == ["Newer", "Older"]
        assert tracks[0].id == TrackId("2")
        assert tracks[1].cover_url == "http://localhost:3000/c.png"

    async def test_http_error_status(self):
        source = make_source(lambda request: httpx.Response(500, json={"error": "boom"}))

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await source.fetch_catalog()

        assert "500" in exc_info.value.message

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        source = make_source(handler)

        with pytest.raises(CatalogUnavailableError):
            await source.fetch_catalog()

    async def test_invalid_json(self):
        source = make_source(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(CatalogUnavailableError):
            await source.fetch_catalog()

    async def test_not_a_list(self):
        source = make_source(lambda request: httpx.Response(200, json={"songs": []}))

        with pytest.raises(CatalogUnavailableError):
            await source.fetch_catalog()

    async def test_malformed_entry(self):
        """A single broken entry should fail the whole fetch."""
        source = make_source(
            lambda request: httpx.Response(200, json=[song(1), {"id": 2, "title": "No url"}])
        )

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await source.fetch_catalog()

        assert "#1" in exc_info.value.message


class TestUploadTrack:
    """Tests for HttpCatalogSource.upload_track."""

    @pytest.fixture
    def audio_file(self, tmp_path):
        path = tmp_path / "My Song.mp3"
        path.write_bytes(b"ID3fake-audio")
        return path

    async def test_upload_sends_multipart_with_token(self, audio_file):
        """Should post the file, title and artist with a bearer token."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json=song(7, "My Song", "Unknown Artist", "/uploads/7.mp3"))

        source = make_source(handler)
        track = await source.upload_track(audio_file)

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/songs"
        assert request.headers["Authorization"] == "Bearer secret"
        body = request.content
        assert b'name="audio"; filename="My Song.mp3"' in body
        assert b'name="title"\r\n\r\nMy Song' in body
        assert b'name="artist"\r\n\r\nUnknown Artist' in body
        assert b"ID3fake-audio" in body
        assert track.id == TrackId("7")
        assert track.audio_url == "http://localhost:3000/uploads/7.mp3"

    async def test_explicit_title_and_artist(self, audio_file):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json=song(8, "Custom", "Someone"))

        source = make_source(handler)
        await source.upload_track(audio_file, title="Custom", artist="Someone")

        assert b'name="title"\r\n\r\nCustom' in seen[0].content
        assert b'name="artist"\r\n\r\nSomeone' in seen[0].content

    async def test_missing_token_fails_before_request(self, audio_file):
        calls = []
        source = make_source(lambda request: calls.append(request), token="")

        with pytest.raises(UploadFailedError):
            await source.upload_track(audio_file)

        assert calls == []

    async def test_missing_file(self, tmp_path):
        source = make_source(lambda request: httpx.Response(201))

        with pytest.raises(UploadFailedError) as exc_info:
            await source.upload_track(tmp_path / "nope.mp3")

        assert "nope.mp3" in exc_info.value.message

    async def test_server_error_detail(self, audio_file):
        """Should surface the server's error field."""
        source = make_source(
            lambda request: httpx.Response(401, json={"error": "Invalid or missing token"})
        )

        with pytest.raises(UploadFailedError) as exc_info:
            await source.upload_track(audio_file)

        assert "401" in exc_info.value.message
        assert "Invalid or missing token" in exc_info.value.message

    async def test_non_json_error_body(self, audio_file):
        source = make_source(lambda request: httpx.Response(413, content=b"Too large"))

        with pytest.raises(UploadFailedError) as exc_info:
            await source.upload_track(audio_file)

        assert "Too large" in exc_info.value.message

    async def test_bad_success_response(self, audio_file):
        source = make_source(lambda request: httpx.Response(201, content=json.dumps({"ok": 1})))

        with pytest.raises(UploadFailedError):
            await source.upload_track(audio_file)
