"""Abstract base class for terminal renderers.

The session orchestrator only ever pushes to a renderer: raw text with
escape sequences, a clear request, and the input-enabled flag. It never
reads rendering state back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Renderer(ABC):
    """Abstract interface for the terminal view.

    Implementations accept raw text containing ANSI escape sequences
    (``\\x1b[2K``, ``\\r``, BEL, ...) and display it as a terminal would.

    Example usage::

        renderer = TerminalRenderer()
        renderer.focus()
        renderer.write("~$ ")
        renderer.set_input_enabled(True)
    """

    @abstractmethod
    def write(self, text: str) -> None:
        """Render raw text at the cursor.

        Raises:
            RendererError: If the text cannot be rendered.
        """
        ...

    @abstractmethod
    def clear_view(self) -> None:
        """Clear the visible area and move the cursor to the top-left."""
        ...

    @abstractmethod
    def set_input_enabled(self, enabled: bool) -> None:
        """Show whether the view currently accepts input."""
        ...

    @property
    @abstractmethod
    def input_enabled(self) -> bool:
        """The last value passed to set_input_enabled()."""
        ...

    def focus(self) -> None:
        """Give the view keyboard focus. No-op unless the view has a focus model."""
        logger.debug("%s has no focus model", type(self).__name__)


class RendererError(Exception):
    """Raised when the terminal view cannot be written."""
