"""Shared pytest fixtures for catmodoro tests."""

from __future__ import annotations

import os
import termios
import threading

import pytest


@pytest.fixture()
def pty_pair():
    """Yield ``(master_fd, slave_file)`` for a fresh pseudo-terminal."""
    master, slave = os.openpty()
    slave_file = os.fdopen(slave, "rb", buffering=0)
    try:
        yield master, slave_file
    finally:
        slave_file.close()
        os.close(master)


@pytest.fixture()
def typist(pty_pair):
    """Return ``type_key(data)``, which keeps typing *data* into the pty.

    Entering cbreak mode flushes pending input, so a single early write could
    be lost.  The key is repeated every 50 ms, but only while the pty is out
    of canonical mode, i.e. while a Terminal holds it.
    """
    master, slave_file = pty_pair
    stop = threading.Event()
    threads: list[threading.Thread] = []

    def _type(data: bytes) -> None:
        while not stop.wait(0.05):
            if not termios.tcgetattr(slave_file.fileno())[3] & termios.ICANON:
                os.write(master, data)

    def type_key(data: bytes) -> None:
        thread = threading.Thread(target=_type, args=(data,), daemon=True)
        threads.append(thread)
        thread.start()

    yield type_key
    stop.set()
    for thread in threads:
        thread.join()
