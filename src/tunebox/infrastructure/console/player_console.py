"""Line-oriented console front end for one player."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import IO, TYPE_CHECKING

from tunebox.domain.shared.events import (
    EngineFaulted,
    EventBus,
    PlaybackRejected,
    QueueExhausted,
    TrackStartedPlaying,
)
from tunebox.domain.shared.exceptions import DomainError
from tunebox.infrastructure.console.formatters import REPEAT_LABELS, format_status, format_view

if TYPE_CHECKING:
    from tunebox.application.services.playback_controller import PlaybackController

logger = logging.getLogger(__name__)

PROMPT = "tunebox> "

HELP_TEXT = """\
Commands:
  p, toggle         play / pause
  n, next           next track
  b, prev           previous track (restarts the track after 3 seconds)
  seek S            jump to S seconds or m:ss
  shuffle [on|off]  toggle or set shuffle
  repeat            cycle repeat: off -> all -> one
  search [TEXT]     filter by title or artist; no text clears the filter
  select N          play row N of the list
  list              show the (filtered) list
  status            show what is playing
  q, quit           exit"""


def parse_time(text: str) -> float:
    """Parse ``90``, ``90.5`` or ``1:30`` into seconds.

    Raises:
        ValueError: If ``text`` is neither form.
    """
    if ":" in text:
        minutes, _, seconds = text.partition(":")
        return int(minutes) * 60 + float(seconds)
    return float(text)


class PlayerConsole:
    """Reads commands from a line source and drives a :class:`PlaybackController`."""

    def __init__(
        self,
        controller: PlaybackController,
        event_bus: EventBus,
        *,
        input_func: Callable[[str], str] = input,
        output: IO[str] | None = None,
    ) -> None:
        self._controller = controller
        self._event_bus = event_bus
        self._input = input_func
        self._out = output or sys.stdout

    def write(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()

    # === Event subscribers ===

    async def _on_track_started(self, event: TrackStartedPlaying) -> None:
        self.write(f"Now playing: {event.track_title}")

    async def _on_rejected(self, event: PlaybackRejected) -> None:
        self.write("Playback did not start; press p to try again.")

    async def _on_exhausted(self, event: QueueExhausted) -> None:
        self.write("End of the catalog.")

    async def _on_engine_fault(self, event: EngineFaulted) -> None:
        self.write(f"Playback error: {event.reason}")

    def _subscribe(self) -> None:
        self._event_bus.subscribe(TrackStartedPlaying, self._on_track_started)
        self._event_bus.subscribe(PlaybackRejected, self._on_rejected)
        self._event_bus.subscribe(QueueExhausted, self._on_exhausted)
        self._event_bus.subscribe(EngineFaulted, self._on_engine_fault)

    def _unsubscribe(self) -> None:
        self._event_bus.unsubscribe(TrackStartedPlaying, self._on_track_started)
        self._event_bus.unsubscribe(PlaybackRejected, self._on_rejected)
        self._event_bus.unsubscribe(QueueExhausted, self._on_exhausted)
        self._event_bus.unsubscribe(EngineFaulted, self._on_engine_fault)

    # === Loop ===

    async def run(self) -> None:
        self._subscribe()
        self.write(format_view(self._controller.search_view, self._controller.current_index))
        try:
            while True:
                try:
                    line = await asyncio.to_thread(self._input, PROMPT)
                except EOFError:
                    break
                if not await self.handle(line):
                    break
        finally:
            self._unsubscribe()

    async def handle(self, line: str) -> bool:
        """Run one command line; returns False when the console should exit."""
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()
        controller = self._controller

        try:
            if not command:
                return True
            if command in ("q", "quit", "exit"):
                return False
            if command in ("p", "toggle", "play", "pause"):
                await controller.toggle_play()
            elif command in ("n", "next"):
                await controller.next()
            elif command in ("b", "prev", "previous"):
                await controller.previous()
            elif command == "seek":
                target = controller.seek_to(parse_time(argument))
                if target is None:
                    self.write("Nothing to seek in.")
            elif command == "shuffle":
                enabled = not controller.shuffle if not argument else argument.lower() == "on"
                controller.set_shuffle(enabled)
                self.write(f"Shuffle {'on' if enabled else 'off'}.")
            elif command == "repeat":
                self.write(f"Repeat {REPEAT_LABELS[controller.cycle_repeat()]}.")
            elif command == "search":
                view = controller.set_query(argument)
                self.write(format_view(view, controller.current_index))
            elif command == "select":
                await controller.select_visible(int(argument) - 1)
            elif command == "list":
                self.write(format_view(controller.search_view, controller.current_index))
            elif command == "status":
                self.write(format_status(controller.snapshot()))
            elif command in ("h", "help", "?"):
                self.write(HELP_TEXT)
            else:
                self.write(f"Unknown command: {command} (type help)")
        except ValueError:
            self.write(f"Invalid argument for {command}: {argument!r}")
        except DomainError as e:
            self.write(e.message)
        return True
