"""Media engines that turn a bound audio URL into sound."""

from tunebox.infrastructure.media.ffplay_engine import EngineState, FFplayMediaEngine

__all__ = [
    "EngineState",
    "FFplayMediaEngine",
]
