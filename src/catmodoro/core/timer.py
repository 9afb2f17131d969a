"""Timer core: a pausable countdown built on monotonic clock arithmetic."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 25

_PLENTY_THRESHOLD = 66.0
_HALFWAY_THRESHOLD = 33.0


class CatmodoroError(Exception):
    """Base class for errors reported to the user."""


class ColorBand(Enum):
    """Cosmetic urgency band for the remaining-time gauge."""

    PLENTY = "plenty"
    HALFWAY = "halfway"
    URGENT = "urgent"


@dataclass(frozen=True)
class Display:
    """Snapshot of what the gauge should show."""

    remaining_seconds: int
    percentage: float
    label: str
    band: ColorBand

    @property
    def percent(self) -> int:
        """Gauge fill level, truncated to a whole percentage."""
        return int(self.percentage)


def format_label(seconds: int) -> str:
    """Format *seconds* as ``MM:SS`` (no hour rollover)."""
    if seconds >= 60:
        return f"{seconds // 60:02d}:{seconds % 60:02d}"
    return f"00:{seconds:02d}"


def band_for(percentage: float) -> ColorBand:
    """Return the colour band for *percentage* of time remaining."""
    if percentage > _PLENTY_THRESHOLD:
        return ColorBand.PLENTY
    if percentage > _HALFWAY_THRESHOLD:
        return ColorBand.HALFWAY
    return ColorBand.URGENT


class PomodoroTimer:
    """A countdown timer that excludes paused time from the elapsed total.

    Uses ``time.monotonic()`` so the countdown is immune to system clock
    changes.  Resuming from a pause shifts ``start_instant`` forward by the
    length of the pause; the timer never restarts.
    """

    def __init__(self, duration_minutes: int = DEFAULT_DURATION_MINUTES) -> None:
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise TypeError(
                f"duration_minutes must be an integer, got {type(duration_minutes).__name__}"
            )
        if duration_minutes < 0:
            raise ValueError(f"duration_minutes must be non-negative, got {duration_minutes}")

        self._duration_minutes: int = duration_minutes
        self.start_instant: float = time.monotonic()
        self.pause_instant: float | None = None
        self.paused: bool = False
        self.finished: bool = False

    # -- public interface ----------------------------------------------------

    @property
    def duration_minutes(self) -> int:
        """Length of the countdown in minutes."""
        return self._duration_minutes

    @property
    def total_seconds(self) -> int:
        """Length of the countdown in seconds."""
        return self._duration_minutes * 60

    def advance(self) -> None:
        """Mark the timer finished once the unpaused elapsed time hits the total.

        No-op while paused or after the timer has already finished.
        """
        if self.paused or self.finished:
            return
        if int(time.monotonic() - self.start_instant) >= self.total_seconds:
            self.finished = True
            logger.info("Timer finished after %d minutes", self._duration_minutes)

    def toggle_pause(self) -> None:
        """Pause a running timer, or resume a paused one where it left off."""
        now = time.monotonic()
        if not self.paused:
            self.paused = True
            self.pause_instant = now
            logger.debug("Paused at %s remaining", self.compute_display().label)
            return

        # pause_instant is always set while paused
        pause_duration = now - self.pause_instant  # type: ignore[operator]
        self.start_instant += pause_duration
        self.pause_instant = None
        self.paused = False
        logger.debug("Resumed after a %.1fs pause", pause_duration)

    def compute_display(self) -> Display:
        """Return the remaining time, percentage and label for the gauge."""
        total = self.total_seconds
        remaining = max(total - self._elapsed_seconds(), 0)
        percentage = remaining / total * 100 if total else 0.0
        return Display(
            remaining_seconds=remaining,
            percentage=percentage,
            label=format_label(remaining),
            band=band_for(percentage),
        )

    # -- private helpers -----------------------------------------------------

    def _elapsed_seconds(self) -> int:
        """Whole seconds elapsed, frozen at the pause instant while paused."""
        if self.paused and self.pause_instant is not None:
            return int(self.pause_instant - self.start_instant)
        return int(time.monotonic() - self.start_instant)
