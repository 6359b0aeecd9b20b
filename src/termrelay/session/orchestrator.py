"""The session orchestrator that drives one interactive terminal.

Ties together the line buffer, tab completion, the connection manager
and the renderer. Every input (keystrokes and channel events) arrives
as a typed event on one queue and is handled to completion before the
next one, so no state is ever touched concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from termrelay.connection.manager import (
    DEFAULT_RECONNECT_DELAY,
    ConnectionManager,
    ConnectionManagerError,
)
from termrelay.domain.models import (
    ChannelClosed,
    ChannelErrored,
    ChannelMessage,
    ChannelOpened,
    Cycle,
    KeyInput,
    KeyKind,
    NoMatch,
    SessionEvent,
    SessionState,
)
from termrelay.editor.completion import DEFAULT_COOLDOWN, CompletionEngine
from termrelay.editor.keys import classify_key
from termrelay.editor.line_buffer import LineBuffer
from termrelay.render.base import Renderer

logger = logging.getLogger(__name__)

ERASE_LINE = "\x1b[2K\r"
BELL = "\x07"
CRLF = "\r\n"
CLEAR_DIRECTIVE = "clear"
NOT_CONNECTED_NOTICE = "Backend not connected. Unable to send commands."


class SessionOrchestrator:
    """Turns keystrokes into commands and executor replies into output.

    Rendering order for an inbound message is fixed: output, then the
    cwd update, then the prompt, then input is re-enabled. Input is
    ignored entirely while disabled (before the first connection and
    after any closure).
    """

    def __init__(
        self,
        renderer: Renderer,
        url: str,
        lexicon: Iterable[str] = (),
        completion_cooldown: float = DEFAULT_COOLDOWN,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        initial_cwd: str = "~",
        prompt_delimiter: str = "$ ",
        banner: Iterable[str] = (),
        connector: Callable[[str], Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._renderer = renderer
        self._buffer = LineBuffer()
        self._completion = CompletionEngine(lexicon, cooldown=completion_cooldown)
        self._connection = ConnectionManager(
            url,
            on_event=self.post,
            reconnect_delay=reconnect_delay,
            connector=connector,
        )
        self._state = SessionState(cwd=initial_cwd)
        self._prompt_delimiter = prompt_delimiter
        self._banner = list(banner)
        self._clock = clock
        self._queue: asyncio.Queue[SessionEvent | None] = asyncio.Queue()
        self._running = False

    @property
    def state(self) -> SessionState:
        """Display state; ``connection_state`` mirrors the connection manager."""
        self._state.connection_state = self._connection.state
        return self._state

    @property
    def line(self) -> str:
        return self._buffer.value

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    @property
    def completion(self) -> CompletionEngine:
        return self._completion

    @property
    def prompt(self) -> str:
        return f"{self._state.cwd}{self._prompt_delimiter}"

    @property
    def is_running(self) -> bool:
        return self._running

    def post(self, event: SessionEvent) -> None:
        """Queue an event for the session. Safe to call from loop callbacks."""
        self._queue.put_nowait(event)

    async def run(self) -> SessionState:
        """Connect and process events until stop() is called."""
        self._running = True
        self._renderer.focus()
        self._connection.connect()
        logger.info("Session started against %s", self._connection.url)

        try:
            while self._running:
                event = await self._queue.get()
                if event is None:
                    break
                await self.dispatch(event)
        finally:
            self._running = False
            self._connection.disconnect()
            logger.info("Session finished")
        return self.state

    def stop(self) -> None:
        """Ask the run loop to finish after the current event."""
        self._running = False
        self._queue.put_nowait(None)
        logger.info("Session stop requested")

    async def dispatch(self, event: SessionEvent) -> None:
        """Handle one event to completion."""
        if isinstance(event, KeyInput):
            await self._handle_key(event.data)
        elif isinstance(event, ChannelMessage):
            self._handle_message(event)
        elif isinstance(event, ChannelOpened):
            self._handle_opened()
        elif isinstance(event, ChannelClosed):
            self._handle_closed(event)
        elif isinstance(event, ChannelErrored):
            self._handle_errored(event)
        else:
            logger.warning("Unknown session event: %s", type(event))

    # ------------------------------------------------------------------
    # Keystrokes
    # ------------------------------------------------------------------

    async def _handle_key(self, data: str) -> None:
        if not self._state.input_enabled:
            logger.debug("Input disabled, dropping %r", data)
            return

        kind = classify_key(data)
        if kind is KeyKind.COMMIT:
            await self._commit()
        elif kind is KeyKind.ERASE:
            if self._buffer.backspace():
                self._renderer.write("\b \b")
            self._completion.reset()
        elif kind is KeyKind.COMPLETE:
            self._complete()
        elif kind is KeyKind.INTERRUPT:
            self._renderer.write("^C" + CRLF)
            self._buffer.reset()
            self._completion.reset()
            self._write_prompt()
        elif kind is KeyKind.END_OF_SESSION:
            if not self._buffer.value:
                self.stop()
        elif kind is KeyKind.PRINTABLE:
            self._renderer.write(data)
            self._buffer.append(data)
            self._completion.reset()

    async def _commit(self) -> None:
        line = self._buffer.value
        self._renderer.write(f"{ERASE_LINE}{self.prompt}{line}{CRLF}")
        self._buffer.reset()
        self._completion.reset()

        command = line.strip()
        if not command:
            self._write_prompt()
        elif command == CLEAR_DIRECTIVE:
            self._renderer.clear_view()
            self._write_prompt()
        else:
            await self._send(command)

    async def _send(self, command: str) -> None:
        try:
            await self._connection.send(command)
        except ConnectionManagerError as e:
            logger.warning("Command dropped (%s): %s", e, command)
            self._renderer.write(NOT_CONNECTED_NOTICE + CRLF)
            self._write_prompt()

    def _complete(self) -> None:
        result = self._completion.complete(self._buffer.value, self._clock())
        if isinstance(result, NoMatch):
            self._renderer.write(BELL)
            return

        if isinstance(result, Cycle) and result.fresh:
            self._rewrite_line()
            self._renderer.write(CRLF + "  ".join(result.candidates) + CRLF)
        self._buffer.replace(result.text)
        self._rewrite_line()

    # ------------------------------------------------------------------
    # Channel events
    # ------------------------------------------------------------------

    def _handle_opened(self) -> None:
        self._renderer.clear_view()
        for line in self._banner:
            self._renderer.write(line + CRLF)
        self._buffer.reset()
        self._completion.reset()
        self._write_prompt()
        self._set_input_enabled(True)

    def _handle_message(self, event: ChannelMessage) -> None:
        message = event.message
        if message.output is not None:
            self._renderer.write(message.output)
            if message.output and not message.output.endswith("\n"):
                self._renderer.write(CRLF)
        if message.cwd_update is not None:
            self._state.cwd = message.cwd_update
            logger.debug("cwd is now %s", message.cwd_update)
        self._buffer.reset()
        self._completion.reset()
        self._write_prompt()
        self._set_input_enabled(True)

    def _handle_closed(self, event: ChannelClosed) -> None:
        self._set_input_enabled(False)
        delay = self._connection.reconnect_delay
        self._renderer.write(
            f"{CRLF}Connection to backend closed. Reconnecting in {delay:g} seconds...{CRLF}"
        )

    def _handle_errored(self, event: ChannelErrored) -> None:
        self._renderer.write(f"{CRLF}Connection error: {event.detail}{CRLF}")
        self._set_input_enabled(False)

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def _write_prompt(self) -> None:
        self._renderer.write(ERASE_LINE + self.prompt)

    def _rewrite_line(self) -> None:
        self._renderer.write(f"{ERASE_LINE}{self.prompt}{self._buffer.value}")

    def _set_input_enabled(self, enabled: bool) -> None:
        self._state.input_enabled = enabled
        self._renderer.set_input_enabled(enabled)
