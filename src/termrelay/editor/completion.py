"""Prefix-based tab completion over a fixed command lexicon.

Repeated Tab presses inside the cooldown window cycle through the
candidate list computed by the first press. A press after the window
(or after any other edit) starts over with a fresh candidate list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from termrelay.domain.models import CompletionResult, Cycle, NoMatch, Unique

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = 0.3  # seconds


class CompletionEngine:
    """Case-insensitive prefix matcher with cyclic selection state.

    Example usage::

        engine = CompletionEngine(["clear", "cls", "cd"])
        engine.complete("cl", now=10.0)   # Cycle("clear", fresh=True)
        engine.complete("clear", now=10.1)  # Cycle("cls", fresh=False)
    """

    def __init__(self, lexicon: Iterable[str], cooldown: float = DEFAULT_COOLDOWN) -> None:
        self._lexicon: tuple[str, ...] = tuple(lexicon)
        self._cooldown = cooldown
        self._candidates: list[str] = []
        self._index = 0
        self._last_trigger_time = 0.0

    @property
    def lexicon(self) -> tuple[str, ...]:
        return self._lexicon

    @property
    def candidates(self) -> tuple[str, ...]:
        return tuple(self._candidates)

    @property
    def index(self) -> int:
        return self._index

    @property
    def last_trigger_time(self) -> float:
        return self._last_trigger_time

    def complete(self, current_line: str, now: float) -> CompletionResult:
        """Resolve one Tab press against the current line.

        Args:
            current_line: The buffer contents at the time of the press.
            now: Current time in seconds, on the same clock for every call.

        Returns:
            NoMatch, Unique or Cycle. The caller applies the text to the
            line buffer and renders it.
        """
        continuous = (
            bool(self._candidates)
            and (now - self._last_trigger_time) < self._cooldown
        )
        self._last_trigger_time = now

        if not continuous:
            self._candidates = self.matches(current_line)
            self._index = 0

        if not self._candidates:
            logger.debug("No completion for %r", current_line)
            return NoMatch()

        if len(self._candidates) == 1:
            return Unique(text=self._candidates[0])

        if not 0 <= self._index < len(self._candidates):
            self._index = 0
        selected = self._candidates[self._index]
        self._index = (self._index + 1) % len(self._candidates)
        logger.debug(
            "Completion %s: %s (%d candidates)",
            "list" if not continuous else "cycle", selected, len(self._candidates),
        )
        return Cycle(text=selected, candidates=tuple(self._candidates), fresh=not continuous)

    def matches(self, prefix: str) -> list[str]:
        """Lexicon entries starting with ``prefix`` (case-insensitive), in lexicon order."""
        lowered = prefix.lower()
        return [cmd for cmd in self._lexicon if cmd.lower().startswith(lowered)]

    def reset(self) -> None:
        """Drop any cycle in progress; the next Tab is a fresh trigger."""
        self._candidates = []
        self._index = 0
        self._last_trigger_time = 0.0
