"""
Playback Domain Services

Index selection rules for automatic and manual track advance. Everything
here is a pure function of its arguments; randomness comes from the
``random.Random`` instance the caller passes in.
"""

from __future__ import annotations

import random

from tunebox.domain.playback.value_objects import RepeatMode


class PlaybackDomainService:
    """Domain service for track-advance and restart rules."""

    @staticmethod
    def next_index(
        *,
        current_index: int,
        length: int,
        shuffle: bool,
        repeat_mode: RepeatMode,
        auto: bool,
        rng: random.Random,
    ) -> int | None:
        """Compute the catalog index to play after the current one.

        Args:
            current_index: Index of the current track.
            length: Number of tracks in the catalog.
            shuffle: Whether shuffle is enabled.
            repeat_mode: The active repeat mode.
            auto: True when the track ended on its own, False for an explicit skip.
            rng: Source of randomness for shuffle.

        Returns:
            The target index, or None when playback should stop instead.
        """
        if length <= 0:
            return None

        # Repeat-one only loops natural track ends; an explicit skip still moves on.
        if auto and repeat_mode == RepeatMode.ONE:
            return current_index

        if shuffle:
            if length == 1:
                return current_index
            target = current_index
            while target == current_index:
                target = rng.randrange(length)
            return target

        if auto and repeat_mode == RepeatMode.OFF and current_index == length - 1:
            return None

        return (current_index + 1) % length

    @staticmethod
    def previous_index(*, current_index: int, length: int) -> int | None:
        """Compute the index before the current one, wrapping backwards.

        Args:
            current_index: Index of the current track.
            length: Number of tracks in the catalog.

        Returns:
            The target index, or None for an empty catalog.
        """
        if length <= 0:
            return None
        return (current_index - 1 + length) % length

    @staticmethod
    def should_restart(position: float, threshold: float) -> bool:
        """Whether ``previous`` rewinds the current track instead of navigating."""
        return position > threshold
