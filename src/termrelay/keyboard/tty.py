"""Raw keystroke input from a POSIX terminal.

Puts the terminal into raw mode so that Enter, Tab, Backspace and
Ctrl+C arrive as their control codes instead of being handled by the
line discipline, and forwards each key to the session as a KeyInput.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import re
import sys
import termios
import tty
from collections.abc import Callable

from termrelay.domain.models import KeyInput

logger = logging.getLogger(__name__)

# CSI (ESC [ params final), SS3 (ESC O x), or ESC + one character
_ESCAPE_SEQUENCE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|O.|.)?", re.DOTALL)


def split_keys(text: str) -> list[str]:
    """Split decoded terminal input into one string per key.

    Escape sequences (arrow keys, function keys, Alt+key) stay whole;
    every other character is its own key.
    """
    keys: list[str] = []
    pos = 0
    while pos < len(text):
        if text[pos] == "\x1b":
            match = _ESCAPE_SEQUENCE.match(text, pos)
            end = match.end() if match else pos + 1
            keys.append(text[pos:end])
            pos = end
        else:
            keys.append(text[pos])
            pos += 1
    return keys


class KeystrokeSource:
    """Reads raw keys from a terminal file descriptor on the event loop.

    When the terminal hangs up (EOF or a read error) the reader is
    removed and ``on_hangup`` is called once.

    Example usage::

        with KeystrokeSource(on_event=session.post, on_hangup=session.stop):
            await session.run()
    """

    def __init__(
        self,
        on_event: Callable[[KeyInput], None],
        fd: int | None = None,
        read_size: int = 1024,
        on_hangup: Callable[[], None] | None = None,
    ) -> None:
        self._on_event = on_event
        self._on_hangup = on_hangup
        self._fd = fd if fd is not None else sys.stdin.fileno()
        self._read_size = read_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._saved_attrs: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_active(self) -> bool:
        return self._loop is not None

    def start(self) -> None:
        """Switch the terminal to raw mode and start reading."""
        if not os.isatty(self._fd):
            raise KeystrokeSourceError(f"File descriptor {self._fd} is not a terminal")
        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setraw(self._fd)
        self._watch()

    def stop(self) -> None:
        """Stop reading and restore the terminal mode. Safe to call twice."""
        self._unwatch()
        if self._saved_attrs is not None:
            attrs, self._saved_attrs = self._saved_attrs, None
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)
            except termios.error as e:
                logger.warning("Could not restore terminal mode on fd %d: %s", self._fd, e)
                return
            logger.info("Terminal mode restored")

    def feed(self, data: bytes) -> None:
        """Decode a chunk of raw bytes and emit one KeyInput per key."""
        text = self._decoder.decode(data)
        for key in split_keys(text):
            self._on_event(KeyInput(data=key))

    def _watch(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self._fd, self._on_readable)
        logger.info("Reading keystrokes from fd %d", self._fd)

    def _unwatch(self) -> None:
        if self._loop is not None:
            self._loop.remove_reader(self._fd)
            self._loop = None

    def _on_readable(self) -> None:
        try:
            data = os.read(self._fd, self._read_size)
        except BlockingIOError:
            return
        except OSError as e:
            logger.warning("Read from terminal failed: %s", e)
            data = b""
        if data:
            self.feed(data)
            return

        logger.info("Terminal on fd %d hung up", self._fd)
        self._unwatch()
        if self._on_hangup is not None:
            self._on_hangup()

    def __enter__(self) -> KeystrokeSource:
        self.start()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.stop()


class KeystrokeSourceError(Exception):
    """Raised when the keystroke source cannot use its file descriptor."""
