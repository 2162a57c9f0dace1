"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"

    # Catalog Errors
    DUPLICATE_TRACK = 'Track "{title}" (id {track_id}) is already in the catalog'
    CATALOG_HTTP_STATUS = "Catalog request failed with HTTP {status}"
    CATALOG_NOT_A_LIST = "Catalog response is not a JSON array"
    CATALOG_MALFORMED_ITEM = "Catalog entry #{position} is malformed: {detail}"
    CATALOG_TRANSPORT = "Catalog request failed: {detail}"
    CATALOG_DATABASE = "Local library could not be read: {detail}"

    # Upload Errors
    UPLOAD_FILE_NOT_FOUND = "File not found: {path}"
    UPLOAD_TOO_LARGE = "File is {size_mb:.1f} MB, the limit is {limit_mb} MB"
    UPLOAD_TOKEN_REQUIRED = "An API token is required to upload tracks"
    UPLOAD_HTTP_STATUS = "Upload failed with HTTP {status}: {detail}"
    UPLOAD_TRANSPORT = "Upload request failed: {detail}"
    UPLOAD_BAD_RESPONSE = "Upload response is not a valid track: {detail}"
    UPLOAD_INVALID_TRACK = "Track details are invalid: {detail}"

    # Playback Errors
    INVALID_SEEK = "Seek target must be a finite number"
    NO_TRACK_SELECTED = "No track is selected"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_BASE_URL = "Catalog base URL must start with http:// or https://"
    INVALID_AUDIO_EXTENSION = "Audio extensions must start with a dot: {extension}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"
    TABLE_MIGRATED = "Migrated table %s: added column %s"
    ROLLBACK_FAILED = "Rollback failed on a broken connection"
    TRACK_INSERTED = "Inserted song %s as row %s"

    # Catalog Operations
    CATALOG_FETCHING = "Fetching catalog from %s"
    CATALOG_FETCHED = "Fetched %d track(s) from %s"
    CATALOG_UNAVAILABLE = "Catalog unavailable, continuing with an empty catalog: %s"
    CATALOG_REPLACED = "Catalog replaced: %d track(s), current index %d"
    CATALOG_TRACK_RELOCATED = "Current track %s moved from index %d to %d"
    CATALOG_TRACK_VANISHED = "Current track %s is no longer in the catalog, stopping"
    CATALOG_TRACK_PREPENDED = "Track '%s' added to the catalog (%d track(s))"
    CATALOG_DUPLICATE_DROPPED = "Dropping duplicate catalog entry %s ('%s')"

    # Upload Operations
    UPLOAD_STARTED = "Uploading '%s' as '%s' by '%s'"
    UPLOAD_COMPLETED = "Uploaded '%s' as track %s"
    UPLOAD_FAILED = "Upload of '%s' failed: %s"
    UPLOAD_FILE_COPIED = "Copied %s to %s"

    # Library Import
    IMPORT_STARTED = "Importing audio files from %s"
    IMPORT_DIRECTORY_MISSING = "Import directory %s does not exist"
    IMPORT_ADDED = "Added: %s"
    IMPORT_FILE_REJECTED = "Skipping %s: %d invalid track field(s)"
    IMPORT_COMPLETED = "Import completed: %d added, %d skipped"

    # Playback Operations
    PLAYBACK_SELECT = "Selecting track %d: '%s'"
    PLAYBACK_STARTED = "Started playing '%s' (index %d)"
    PLAYBACK_PAUSED = "Paused '%s' at %.1fs"
    PLAYBACK_RESUMED = "Resumed '%s' at %.1fs"
    PLAYBACK_REJECTED = "Engine rejected play for '%s' (index %d), reverting to paused"
    PLAYBACK_ENGINE_RAISED = "Media engine raised while starting '%s'"
    PLAYBACK_STALE_COMPLETION = "Ignoring stale play completion (token %d, current %d)"
    PLAYBACK_STOPPED = "Playback stopped at index %d (%s)"
    PLAYBACK_SEEK = "Seek to %.1fs (requested %.1fs)"
    PLAYBACK_RESTART = "Restarting '%s' from the beginning"
    PLAYBACK_NO_TRACK = "Ignoring %s: no track selected"
    PLAYBACK_ENDED = "Track ended: '%s' (index %d)"
    PLAYBACK_ENDED_IGNORED = "Ignoring ended event while stopped"
    PLAYBACK_QUEUE_EXHAUSTED = "Reached the end of the catalog at index %d"
    PLAYBACK_ENGINE_FAULT = "Engine fault on '%s': %s"
    PLAYBACK_SHUFFLE = "Shuffle %s"
    PLAYBACK_REPEAT = "Repeat mode is now %s"
    PLAYBACK_QUERY = "Search query %r matches %d of %d track(s)"

    # Media Engine
    ENGINE_SPAWNED = "Spawned %s for %s at %.1fs (pid %s)"
    ENGINE_SPAWN_FAILED = "Failed to start %s: %r"
    ENGINE_EXITED_EARLY = "%s exited immediately with code %s"
    ENGINE_PROCESS_EXITED = "Player process exited with code %s"
    ENGINE_PROBE_FAILED = "Could not read duration of %s: %r"
    ENGINE_CALLBACK_ERROR = "Error in media engine %s callback"
    ENGINE_SIGNAL_FAILED = "Could not signal player process: %r"
    ENGINE_PAUSE_DEFERRED = "Applying pause requested while starting (pid %s)"

    # Event Bus
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"
    EVENT_CLEARED = "Cleared all event handlers"

    # Application Lifecycle
    APP_STARTING = "Starting tunebox (environment: {environment})"
    APP_STOPPED = "tunebox stopped"
    APP_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    APP_FATAL_ERROR = "Fatal error: %s"
    SHUTDOWN_STEP_FAILED = "Failed during shutdown of %s: %r"
