"""In-progress command line for a terminal session."""

from __future__ import annotations


class LineBuffer:
    """Holds the characters typed since the last commit or reset.

    All operations are total; erasing an empty buffer is a no-op.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text

    @property
    def value(self) -> str:
        return self._text

    def append(self, text: str) -> None:
        self._text += text

    def backspace(self) -> bool:
        """Remove the last character. Returns whether anything was removed."""
        if not self._text:
            return False
        self._text = self._text[:-1]
        return True

    def reset(self) -> None:
        self._text = ""

    def replace(self, text: str) -> None:
        """Replace the whole line (used by tab completion)."""
        self._text = text

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"LineBuffer({self._text!r})"
