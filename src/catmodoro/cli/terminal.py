"""Terminal session: cbreak input, alternate screen and key polling.

``Terminal`` is a context manager.  Entering it switches stdin to cbreak
mode and starts a full-screen ``rich.live.Live``; leaving it, on any path,
puts both back.  ``restore()`` is idempotent so an outer guard may call it
again after a crash.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from typing import IO, Any

from rich.console import Console
from rich.live import Live

from catmodoro.cli.render import render_gauge
from catmodoro.core.timer import CatmodoroError, Display

logger = logging.getLogger(__name__)

ESCAPE = "escape"
ESCAPE_SEQUENCE = "escape-sequence"

_ESC = b"\x1b"
_CTRL_C = b"\x03"


class TerminalError(CatmodoroError):
    """Raised when the terminal cannot be used interactively."""


class Terminal:
    """Owns the console for the duration of a countdown."""

    def __init__(self, console: Console | None = None, stdin: IO[Any] | None = None) -> None:
        self._console: Console = console if console is not None else Console()
        self._stdin = stdin if stdin is not None else sys.stdin
        self._fd: int | None = None
        self._saved_attrs: list[Any] | None = None
        self._live: Live | None = None

    @property
    def console(self) -> Console:
        """The console the gauge is drawn on."""
        return self._console

    @property
    def active(self) -> bool:
        """True while cbreak mode or the alternate screen is held."""
        return self._live is not None or self._saved_attrs is not None

    # -- context management ---------------------------------------------------

    def __enter__(self) -> Terminal:
        try:
            fd = self._stdin.fileno()
        except (AttributeError, ValueError, OSError) as exc:
            raise TerminalError("stdin has no file descriptor") from exc
        if not os.isatty(fd):
            raise TerminalError("catmodoro must be run in an interactive terminal")

        self._fd = fd
        self._saved_attrs = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            # Signal keys arrive as bytes so no signal can bypass restore().
            mode = termios.tcgetattr(fd)
            mode[3] &= ~termios.ISIG
            termios.tcsetattr(fd, termios.TCSADRAIN, mode)
            self._live = Live(
                console=self._console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()
        except BaseException:
            self.restore()
            raise
        logger.debug("Entered alternate screen on fd %d", fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.restore()
        return False

    def restore(self) -> None:
        """Leave the alternate screen and restore the saved tty attributes."""
        try:
            if self._live is not None:
                live, self._live = self._live, None
                live.stop()
        finally:
            if self._saved_attrs is not None and self._fd is not None:
                attrs, self._saved_attrs = self._saved_attrs, None
                termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)
                logger.debug("Restored terminal attributes on fd %d", self._fd)

    # -- drawing and input ---------------------------------------------------

    def draw(self, display: Display, paused: bool = False) -> None:
        """Redraw the gauge so it fills the whole screen."""
        if self._live is None:
            raise TerminalError("draw() called outside of an active terminal session")
        height = self._console.size.height
        self._live.update(render_gauge(display, paused, height), refresh=True)

    def poll_key(self, timeout: float) -> str | None:
        """Wait up to *timeout* seconds for one key press.

        Returns the typed character, ``"escape"`` for a lone Esc,
        ``"escape-sequence"`` for arrow and function keys, or ``None`` when
        nothing was typed.  Ctrl-C raises ``KeyboardInterrupt``; other
        control keys such as Ctrl-\\ and Ctrl-Z come back as plain characters.
        """
        if self._fd is None:
            raise TerminalError("poll_key() called outside of an active terminal session")
        if not self._ready(timeout):
            return None
        return self._read_key()

    # -- private helpers -----------------------------------------------------

    def _ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def _read_key(self) -> str:
        data = os.read(self._fd, 1)  # type: ignore[arg-type]
        if not data:
            raise TerminalError("Input stream closed")
        if data == _CTRL_C:
            raise KeyboardInterrupt
        if data != _ESC:
            return data.decode(errors="replace")

        # A lone ESC arrives by itself; arrow keys and friends arrive as a burst.
        sequence = data
        while self._ready(0):
            chunk = os.read(self._fd, 1)  # type: ignore[arg-type]
            if not chunk:
                break
            sequence += chunk
        return ESCAPE if sequence == _ESC else ESCAPE_SEQUENCE
