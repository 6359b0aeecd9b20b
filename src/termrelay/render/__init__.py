"""Terminal rendering for termrelay.

Public API:
    Renderer -- Abstract base class
    RendererError -- Raised when the view cannot be written
    TerminalRenderer -- Writes ANSI text to a stream
"""

from termrelay.render.base import Renderer, RendererError
from termrelay.render.terminal import TerminalRenderer

__all__ = ["Renderer", "RendererError", "TerminalRenderer"]
