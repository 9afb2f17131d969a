"""Session loop: advances the timer, redraws it and applies key presses."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from catmodoro.core.timer import Display, PomodoroTimer

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds; doubles as the redraw interval

QUIT_KEYS = frozenset({"q", "escape"})
PAUSE_KEY = "p"


class SessionState(Enum):
    """Possible states of the session loop."""

    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    QUIT = "quit"


_TERMINAL_STATES = frozenset({SessionState.FINISHED, SessionState.QUIT})


class Screen(Protocol):
    """What the session needs from the terminal layer."""

    def draw(self, display: Display, paused: bool) -> None: ...

    def poll_key(self, timeout: float) -> str | None: ...


class Session:
    """Drives one countdown from start to completion or quit.

    Each iteration advances the timer, draws it unless it just finished,
    then waits up to *poll_interval* seconds for a single key press.  The
    session owns *timer* for the whole run.  Errors raised by *screen*
    propagate to the caller so the terminal can be restored.
    """

    def __init__(
        self,
        timer: PomodoroTimer,
        screen: Screen,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._timer = timer
        self._screen = screen
        self._poll_interval = poll_interval
        self._state: SessionState = SessionState.RUNNING

    @property
    def state(self) -> SessionState:
        """Current state of the loop."""
        return self._state

    @property
    def timer(self) -> PomodoroTimer:
        """The timer this session drives."""
        return self._timer

    def run(self) -> SessionState:
        """Loop until the timer finishes or the user quits; return the final state."""
        logger.info("Session started: %d minutes", self._timer.duration_minutes)
        while self._state not in _TERMINAL_STATES:
            self.step()
        logger.info("Session ended: %s", self._state.value)
        return self._state

    def step(self) -> SessionState:
        """Run a single advance, draw and poll iteration."""
        if self._state in _TERMINAL_STATES:
            return self._state

        self._timer.advance()
        if self._timer.finished:
            self._state = SessionState.FINISHED
            return self._state

        self._screen.draw(self._timer.compute_display(), self._timer.paused)

        key = self._screen.poll_key(self._poll_interval)
        if key is not None:
            self.handle_key(key)
        return self._state

    def handle_key(self, key: str) -> None:
        """Apply *key* to the session; unknown keys are ignored."""
        if key in QUIT_KEYS:
            logger.debug("Quit requested with %r", key)
            self._state = SessionState.QUIT
        elif key == PAUSE_KEY:
            self._timer.toggle_pause()
            self._state = SessionState.PAUSED if self._timer.paused else SessionState.RUNNING
