"""Line editing for termrelay.

Public API:
    LineBuffer -- The in-progress command line
    CompletionEngine -- Prefix tab completion over a lexicon
    classify_key -- Maps one input event to a KeyKind
"""

from termrelay.editor.completion import CompletionEngine
from termrelay.editor.keys import classify_key
from termrelay.editor.line_buffer import LineBuffer

__all__ = ["CompletionEngine", "LineBuffer", "classify_key"]
