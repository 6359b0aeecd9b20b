"""Keyboard input for termrelay.

Public API:
    KeystrokeSource -- Raw-mode TTY reader that emits KeyInput events
    KeystrokeSourceError -- Raised when the input is not a terminal
    split_keys -- Splits decoded input into individual keys
"""

from termrelay.keyboard.tty import KeystrokeSource, KeystrokeSourceError, split_keys

__all__ = ["KeystrokeSource", "KeystrokeSourceError", "split_keys"]
