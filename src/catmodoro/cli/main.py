"""CLI entry point for catmodoro.

Uses Click to expose the ``catmodoro`` command, which runs a single
countdown in a full-screen terminal gauge.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, TypeVar

import click

import catmodoro
from catmodoro.cli.terminal import Terminal
from catmodoro.core.session import Session, SessionState
from catmodoro.core.timer import DEFAULT_DURATION_MINUTES, CatmodoroError, PomodoroTimer

T = TypeVar("T")

logger = logging.getLogger(__name__)

CRASH_MESSAGE = "The application crashed, but the terminal was restored."
FINISHED_MESSAGE = "Time's up! Take a break."

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``CatmodoroError`` to a CLI error.

    On ``CatmodoroError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except CatmodoroError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def configure_logging(log_file: Path | None, verbose: bool = False) -> None:
    """Send log records to *log_file*; the screen belongs to the gauge."""
    if log_file is None:
        return

    level = logging.DEBUG if verbose else logging.INFO
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    package_logger = logging.getLogger("catmodoro")
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    logger.info("Logging initialized: level=%s", logging.getLevelName(level))


def run_countdown(duration: int, terminal: Terminal) -> SessionState:
    """Run one countdown inside *terminal*, always restoring it afterwards."""
    timer = PomodoroTimer(duration)
    with terminal:
        return Session(timer, terminal).run()


@click.command()
@click.version_option(version=catmodoro.__version__, prog_name="catmodoro")
@click.option(
    "-d",
    "--duration",
    type=click.IntRange(min=0),
    default=DEFAULT_DURATION_MINUTES,
    show_default=True,
    metavar="MINUTES",
    help="Length of the countdown in minutes.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a log of the session to this file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug detail (with --log-file).")
def cli(duration: int, log_file: Path | None, verbose: bool) -> None:
    """catmodoro: a terminal Pomodoro timer.

    Press p to pause or resume, q or Esc to quit.
    """
    configure_logging(log_file, verbose)
    terminal = Terminal()

    try:
        state = _run(lambda: run_countdown(duration, terminal))
    except KeyboardInterrupt:
        terminal.restore()
        logger.info("Interrupted")
        sys.exit(130)
    except OSError as exc:
        terminal.restore()
        logger.error("Terminal I/O failed: %s", exc)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except Exception:
        terminal.restore()
        logger.exception("Session aborted")
        click.echo(CRASH_MESSAGE, err=True)
        sys.exit(1)

    if state == SessionState.FINISHED:
        click.echo(FINISHED_MESSAGE)
