"""Classification of raw terminal input into key kinds."""

from __future__ import annotations

from termrelay.domain.models import KeyKind

CR = 13
LF = 10
BS = 8
DEL = 127
TAB = 9
ETX = 3  # Ctrl+C
EOT = 4  # Ctrl+D

_CONTROL_KINDS = {
    CR: KeyKind.COMMIT,
    DEL: KeyKind.ERASE,
    BS: KeyKind.ERASE,
    TAB: KeyKind.COMPLETE,
    ETX: KeyKind.INTERRUPT,
    EOT: KeyKind.END_OF_SESSION,
}


def classify_key(data: str) -> KeyKind:
    """Decide what one input event means, based on its first character."""
    if not data:
        return KeyKind.IGNORED
    code = ord(data[0])
    kind = _CONTROL_KINDS.get(code)
    if kind is not None:
        return kind
    if code >= 32 or code == LF:
        return KeyKind.PRINTABLE
    return KeyKind.IGNORED
