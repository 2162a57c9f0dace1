import asyncio
from collections import deque

import pytest
import pytest_asyncio

from tunebox.application.interfaces.media_engine import MediaEngine
from tunebox.domain.catalog.entities import Track
from tunebox.domain.shared.events import reset_event_bus

# ============================================================================
# Fakes
# ============================================================================


class FakeMediaEngine(MediaEngine):
    """Scriptable media engine.

    ``play`` outcomes are taken from ``play_results`` (True by default; an
    Exception instance is raised). With ``hold_plays`` set, every ``play``
    waits on a future the test resolves through :meth:`release`.
    """

    def __init__(self) -> None:
        self.bound: list[str] = []
        self.play_calls = 0
        self.pause_calls = 0
        self.seeks: list[float] = []
        self.closed = False
        self.play_results: deque[bool | Exception] = deque()
        self.hold_plays = False
        self.pending: list[asyncio.Future[bool]] = []
        self.on_time_update = None
        self.on_loaded_metadata = None
        self.on_ended = None
        self.on_error = None

    def set_event_callbacks(self, *, on_time_update, on_loaded_metadata, on_ended, on_error):
        self.on_time_update = on_time_update
        self.on_loaded_metadata = on_loaded_metadata
        self.on_ended = on_ended
        self.on_error = on_error

    def bind(self, audio_url: str) -> None:
        self.bound.append(audio_url)

    async def play(self) -> bool:
        self.play_calls += 1
        if self.hold_plays:
            future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        outcome = self.play_results.popleft() if self.play_results else True
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def pause(self) -> None:
        self.pause_calls += 1

    def seek(self, seconds: float) -> None:
        self.seeks.append(seconds)

    async def close(self) -> None:
        self.closed = True

    def release(self, index: int, result: bool) -> None:
        self.pending[index].set_result(result)


def make_track(track_id: int | str, title: str, artist: str = "Unknown Artist") -> Track:
    return Track(
        id=track_id,
        title=title,
        artist=artist,
        audio_url=f"http://localhost:3000/uploads/{track_id}.mp3",
    )


# ============================================================================
# Event Bus
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Give every test its own process-wide event bus."""
    reset_event_bus()
    yield
    reset_event_bus()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from tunebox.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def track_repository(in_memory_database, tmp_path):
    """Create a track repository with in-memory database."""
    from tunebox.infrastructure.persistence.repositories.track_repository import (
        SQLiteTrackRepository,
    )

    return SQLiteTrackRepository(in_memory_database, tmp_path / "uploads")


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def track_a():
    return make_track(1, "Bohemian Rhapsody", "Queen")


@pytest.fixture
def track_b():
    return make_track(2, "Blue in Green", "Miles Davis")


@pytest.fixture
def track_c():
    return make_track(3, "Queen of the Night", "Whitney Houston")


@pytest.fixture
def catalog(track_a, track_b, track_c):
    """Catalog [A, B, C]."""
    return (track_a, track_b, track_c)


# ============================================================================
# Player Fixtures
# ============================================================================


@pytest.fixture
def media_engine():
    return FakeMediaEngine()


@pytest.fixture
def controller(media_engine):
    """Playback controller over the fake engine, with an empty catalog."""
    import random

    from tunebox.application.services.playback_controller import PlaybackController

    return PlaybackController(media_engine=media_engine, rng=random.Random(1234))


@pytest.fixture
def loaded_controller(controller, catalog):
    """Controller with catalog [A, B, C] and A preselected, stopped."""
    controller.replace_catalog(catalog)
    return controller
