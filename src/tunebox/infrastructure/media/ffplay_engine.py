"""
FFplay Media Engine

Infrastructure component that plays the bound track through an ``ffplay``
subprocess and reports progress, duration, end of track and faults back to
the playback controller.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from tunebox.application.interfaces.media_engine import (
    EndedCallback,
    ErrorCallback,
    MediaEngine,
    MetadataCallback,
    TimeUpdateCallback,
)
from tunebox.config.settings import MediaSettings
from tunebox.domain.shared.constants import MediaConstants
from tunebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """States of the ffplay process."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


def _noop_time_update(position: float, duration: float) -> None:
    return None


def _noop_metadata(duration: float) -> None:
    return None


async def _noop_ended() -> None:
    return None


async def _noop_error(reason: str) -> None:
    return None


class FFplayMediaEngine(MediaEngine):
    """Media engine backed by one ``ffplay -nodisp -autoexit`` process at a time.

    Pausing stops the process with SIGSTOP and resuming continues it with
    SIGCONT. Seeking while audio is running restarts ffplay at the new
    offset; otherwise the offset is kept for the next ``play``.

    Every process the engine terminates itself is retired by bumping a
    serial number, so only natural exits are reported as ``ended`` or
    ``error``.
    """

    def __init__(self, settings: MediaSettings | None = None) -> None:
        self._settings = settings or MediaSettings()

        self._audio_url: str | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._state = EngineState.IDLE

        # Position is the -ss offset plus time spent running since the last resume
        self._offset = 0.0
        self._resumed_at: float | None = None
        self._duration = 0.0

        self._bind_serial = 0
        self._process_serial = 0

        # pause() while ffplay is still being started is applied once it is up
        self._starting = False
        self._pause_requested = False

        self._ticker_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

        self._on_time_update: TimeUpdateCallback = _noop_time_update
        self._on_loaded_metadata: MetadataCallback = _noop_metadata
        self._on_ended: EndedCallback = _noop_ended
        self._on_error: ErrorCallback = _noop_error

    # === MediaEngine ===

    def set_event_callbacks(
        self,
        *,
        on_time_update: TimeUpdateCallback,
        on_loaded_metadata: MetadataCallback,
        on_ended: EndedCallback,
        on_error: ErrorCallback,
    ) -> None:
        self._on_time_update = on_time_update
        self._on_loaded_metadata = on_loaded_metadata
        self._on_ended = on_ended
        self._on_error = on_error

    def bind(self, audio_url: str) -> None:
        self._terminate()
        self._bind_serial += 1
        self._audio_url = audio_url
        self._offset = 0.0
        self._resumed_at = None
        self._duration = 0.0

    async def play(self) -> bool:
        self._pause_requested = False
        if self._audio_url is None:
            return False

        if self._state == EngineState.PLAYING and self._is_alive():
            return True

        if self._state == EngineState.PAUSED and self._is_alive():
            if not self._signal(signal.SIGCONT):
                return False
            self._state = EngineState.PLAYING
            self._resumed_at = time.monotonic()
            self._start_ticker()
            return True

        if self._duration <= 0:
            self._spawn_task(self._read_duration(self._audio_url, self._bind_serial))
        return await self._spawn(self._offset)

    def pause(self) -> None:
        if self._starting:
            self._pause_requested = True
            return
        if self._state != EngineState.PLAYING or not self._is_alive():
            return
        if self._signal(signal.SIGSTOP):
            self._offset = self.position
            self._resumed_at = None
            self._state = EngineState.PAUSED
            self._stop_ticker()

    def seek(self, seconds: float) -> None:
        target = max(0.0, seconds)
        was_playing = self._state == EngineState.PLAYING and self._is_alive()
        self._terminate()
        self._offset = target
        self._resumed_at = None
        if was_playing:
            self._spawn_task(self._respawn(target))

    async def close(self) -> None:
        self._terminate()
        self._bind_serial += 1
        self._audio_url = None
        self._stop_ticker()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # === State access ===

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def audio_url(self) -> str | None:
        return self._audio_url

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        running = 0.0
        if self._resumed_at is not None:
            running = time.monotonic() - self._resumed_at
        position = self._offset + running
        if self._duration > 0:
            return min(position, self._duration)
        return position

    # === Process management ===

    def build_command(self, offset: float) -> list[str]:
        command = [
            self._settings.ffplay_path,
            *MediaConstants.FFPLAY_BASE_ARGS,
            "-volume",
            str(self._settings.volume),
        ]
        if offset > 0:
            command += ["-ss", f"{offset:.3f}"]
        command.append(self._audio_url or "")
        return command

    async def _spawn(self, offset: float) -> bool:
        serial = self._process_serial
        command = self.build_command(offset)
        self._starting = True
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(LogTemplates.ENGINE_SPAWN_FAILED, command[0], e)
            self._pause_requested = False
            return False
        finally:
            self._starting = False

        if serial != self._process_serial:
            # Superseded by bind or seek while starting up
            self._kill(process)
            return False

        self._process = process
        self._state = EngineState.PLAYING
        self._offset = offset
        self._resumed_at = time.monotonic()

        try:
            code = await asyncio.wait_for(
                asyncio.shield(process.wait()), MediaConstants.SPAWN_GRACE_SECONDS
            )
        except TimeoutError:
            code = None

        if serial != self._process_serial:
            return False

        if code is not None and code != 0:
            logger.warning(LogTemplates.ENGINE_EXITED_EARLY, command[0], code)
            self._resumed_at = None
            self._reset_process()
            return False

        logger.debug(LogTemplates.ENGINE_SPAWNED, command[0], self._audio_url, offset, process.pid)
        self._spawn_task(self._watch(process, serial))
        if self._pause_requested:
            self._pause_requested = False
            logger.debug(LogTemplates.ENGINE_PAUSE_DEFERRED, process.pid)
            self.pause()
        if self._state == EngineState.PLAYING:
            self._start_ticker()
        return True

    async def _respawn(self, offset: float) -> None:
        if not await self._spawn(offset) and self._audio_url is not None:
            await self._safe_callback("error", self._on_error, "ffplay could not seek")

    async def _watch(self, process: asyncio.subprocess.Process, serial: int) -> None:
        code = await process.wait()
        if serial != self._process_serial:
            return

        logger.debug(LogTemplates.ENGINE_PROCESS_EXITED, code)
        stderr = b""
        if process.stderr is not None:
            with contextlib.suppress(OSError, ValueError):
                stderr = await process.stderr.read()
        self._reset_process()

        if code == 0:
            await self._safe_callback("ended", self._on_ended)
        else:
            detail = stderr.decode(errors="replace").strip()
            reason = detail.splitlines()[-1] if detail else f"ffplay exited with code {code}"
            await self._safe_callback("error", self._on_error, reason)

    async def _read_duration(self, audio_url: str, bind_serial: int) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                self._settings.ffprobe_path,
                *MediaConstants.FFPROBE_DURATION_ARGS,
                audio_url,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
            stdout, _ = await process.communicate()
            duration = float(stdout.decode().strip())
        except (OSError, ValueError) as e:
            logger.debug(LogTemplates.ENGINE_PROBE_FAILED, audio_url, e)
            return

        if bind_serial != self._bind_serial or duration <= 0:
            return
        self._duration = duration
        try:
            self._on_loaded_metadata(duration)
        except Exception:
            logger.exception(LogTemplates.ENGINE_CALLBACK_ERROR, "loaded_metadata")

    async def _tick(self) -> None:
        interval = self._settings.progress_interval_s
        while True:
            await asyncio.sleep(interval)
            try:
                self._on_time_update(self.position, self._duration)
            except Exception:
                logger.exception(LogTemplates.ENGINE_CALLBACK_ERROR, "time_update")

    # === Helpers ===

    def _is_alive(self) -> bool:
        return self._process is not None and self._process.returncode is None

    def _signal(self, sig: signal.Signals) -> bool:
        if self._process is None:
            return False
        try:
            self._process.send_signal(sig)
        except ProcessLookupError as e:
            logger.warning(LogTemplates.ENGINE_SIGNAL_FAILED, e)
            return False
        return True

    def _terminate(self) -> None:
        """Retire the current process so its exit is not reported."""
        self._process_serial += 1
        self._pause_requested = False
        if self._process is not None:
            self._kill(self._process)
        self._reset_process()

    def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError as e:
            logger.debug(LogTemplates.ENGINE_SIGNAL_FAILED, e)
            return
        # Reap in the background
        self._spawn_task(process.wait())

    def _reset_process(self) -> None:
        if self._resumed_at is not None:
            self._offset = self.position
            self._resumed_at = None
        self._process = None
        self._state = EngineState.IDLE
        self._stop_ticker()

    def _start_ticker(self) -> None:
        self._stop_ticker()
        self._ticker_task = asyncio.create_task(self._tick())

    def _stop_ticker(self) -> None:
        if self._ticker_task is not None:
            self._ticker_task.cancel()
            self._ticker_task = None

    def _spawn_task(self, coro: Awaitable[Any]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _safe_callback(
        self, name: str, callback: Callable[..., Awaitable[None]], *args: Any
    ) -> None:
        try:
            await callback(*args)
        except Exception:
            logger.exception(LogTemplates.ENGINE_CALLBACK_ERROR, name)
