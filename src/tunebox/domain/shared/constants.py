"""Centralized constants for database schema, API shapes, and other shared values.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class DatabaseTables:
    """Database table names."""

    SONGS = "songs"


class DatabaseColumns:
    """Database column names for the local library."""

    ID = "id"
    TITLE = "title"
    ARTIST = "artist"
    COVER = "cover"
    URL = "url"
    CREATED_AT = "created_at"


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These pragmas are applied to each connection to ensure consistent behavior.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
    TABLE_INFO = "PRAGMA table_info({table})"


class DatabaseURLSchemes:
    """Valid database URL schemes for validation."""

    SQLITE = "sqlite://"
    SQLITE_FILE_PREFIX = "sqlite:///"

    # For in-memory testing
    MEMORY = ":memory:"
    MEMORY_SHARED_URI = "file:tunebox?mode=memory&cache=shared"


class CatalogApi:
    """Paths and field names of the songs HTTP API."""

    SONGS_PATH = "/api/songs"

    # JSON payload keys
    ID = "id"
    TITLE = "title"
    ARTIST = "artist"
    COVER = "cover"
    URL = "url"
    ERROR = "error"

    # Multipart form fields
    FORM_AUDIO = "audio"
    FORM_TITLE = "title"
    FORM_ARTIST = "artist"


class HTTPHeaders:
    """HTTP header names and common values."""

    AUTHORIZATION = "Authorization"
    ACCEPT = "Accept"
    BEARER = "Bearer {token}"
    JSON = "application/json"


class LibraryConstants:
    """Defaults for tracks created from local files."""

    DEFAULT_ARTIST = "Unknown Artist"
    DEFAULT_COVER_URL = (
        "https://images.unsplash.com/photo-1459749411177-d4a37196040e"
        "?auto=format&fit=crop&q=80&w=400&h=400"
    )
    AUDIO_EXTENSIONS = (".mp3", ".wav", ".ogg", ".m4a")
    MAX_UPLOAD_MB = 100
    FALLBACK_EXTENSION = ".mp3"

    # Extension used when an uploaded file name has none
    MIME_EXTENSIONS = {
        "audio/mpeg": ".mp3",
        "audio/wav": ".wav",
        "audio/ogg": ".ogg",
        "video/mp4": ".mp4",
    }


class PlaybackConstants:
    """Transport tuning values."""

    # previous() restarts the current track instead of navigating past this point
    RESTART_THRESHOLD_SECONDS = 3.0


class MediaConstants:
    """Defaults for the ffplay media engine."""

    FFPLAY_BINARY = "ffplay"
    FFPROBE_BINARY = "ffprobe"
    FFPLAY_BASE_ARGS = ("-nodisp", "-autoexit", "-loglevel", "error")
    FFPROBE_DURATION_ARGS = (
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
    )
    PROGRESS_INTERVAL_SECONDS = 0.5
    # A process that dies within this window never really started
    SPAWN_GRACE_SECONDS = 0.2


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
