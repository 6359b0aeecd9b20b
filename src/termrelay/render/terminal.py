"""Renderer that writes straight to a terminal stream."""

from __future__ import annotations

import logging
import re
import sys
from typing import TextIO

from termrelay.render.base import Renderer, RendererError

logger = logging.getLogger(__name__)

CLEAR_VIEW = "\x1b[H\x1b[2J"
SHOW_CURSOR = "\x1b[?25h"
HIDE_CURSOR = "\x1b[?25l"

_BARE_LF = re.compile(r"(?<!\r)\n")


class TerminalRenderer(Renderer):
    """Writes escape sequences to a text stream (stdout by default).

    In raw mode a bare LF moves down without returning to column zero,
    so by default every LF not preceded by CR is written as CRLF.
    """

    def __init__(self, stream: TextIO | None = None, convert_eol: bool = True) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._convert_eol = convert_eol
        self._input_enabled = False

    @property
    def input_enabled(self) -> bool:
        return self._input_enabled

    def write(self, text: str) -> None:
        if self._convert_eol:
            text = _BARE_LF.sub("\r\n", text)
        try:
            self._stream.write(text)
            self._stream.flush()
        except (OSError, ValueError) as e:
            raise RendererError(f"Failed to write to terminal: {e}") from e

    def clear_view(self) -> None:
        self.write(CLEAR_VIEW)

    def set_input_enabled(self, enabled: bool) -> None:
        if enabled == self._input_enabled:
            return
        self._input_enabled = enabled
        self.write(SHOW_CURSOR if enabled else HIDE_CURSOR)
        logger.debug("Input %s", "enabled" if enabled else "disabled")

    def restore(self) -> None:
        """Leave the terminal with a visible cursor on a fresh line."""
        self.write(SHOW_CURSOR + "\r\n")
