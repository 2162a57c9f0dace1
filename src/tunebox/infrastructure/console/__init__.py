"""Console front end."""

from tunebox.infrastructure.console.player_console import PlayerConsole

__all__ = [
    "PlayerConsole",
]
