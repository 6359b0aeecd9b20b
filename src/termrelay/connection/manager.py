"""Lifecycle of the duplex channel to the remote executor.

Owns the single WebSocket, reports what happens to it as typed channel
events, and reconnects after a fixed delay whenever the channel closes.
Nothing outside this module holds a reference to the socket.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import websockets
from pydantic import ValidationError
from websockets.exceptions import ConnectionClosedError, WebSocketException

from termrelay.domain.models import (
    ChannelClosed,
    ChannelErrored,
    ChannelEvent,
    ChannelMessage,
    ChannelOpened,
    ConnectionState,
    WireMessage,
)

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 5.0  # seconds
ABNORMAL_CLOSURE = 1006


class ConnectionManager:
    """Connects, disconnects and reconnects the channel to the executor.

    Every channel opened by ``connect()`` belongs to a generation. Events
    raised by a superseded generation (for example the close of a socket
    that ``disconnect()`` already dropped) are ignored.

    Example usage::

        manager = ConnectionManager("ws://localhost:3000/ws", on_event=queue.put_nowait)
        manager.connect()
        ...
        await manager.send("ls")
        manager.disconnect()
    """

    def __init__(
        self,
        url: str,
        on_event: Callable[[ChannelEvent], None],
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        connector: Callable[[str], Any] | None = None,
    ) -> None:
        self._url = url
        self._on_event = on_event
        self._reconnect_delay = reconnect_delay
        self._connector = connector or websockets.connect
        self._state = ConnectionState.DISCONNECTED
        self._channel: Any = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0
        self._reconnect_handle: asyncio.TimerHandle | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def reconnect_delay(self) -> float:
        return self._reconnect_delay

    @property
    def reconnect_pending(self) -> bool:
        """Whether a reconnect timer is armed."""
        return self._reconnect_handle is not None

    def connect(self) -> None:
        """Open a new channel unless one is already open or opening.

        A call while ``connecting`` is also a no-op, so a pending
        handshake is never doubled by a second socket.

        Must be called from inside a running event loop. Returns
        immediately; the outcome arrives as ChannelOpened, or as
        ChannelErrored followed by ChannelClosed.
        """
        if self._state is not ConnectionState.DISCONNECTED:
            logger.debug("Channel already %s, connect() ignored", self._state.value)
            return

        self._cancel_reconnect()
        self._generation += 1
        self._state = ConnectionState.CONNECTING
        self._task = asyncio.get_running_loop().create_task(
            self._run_channel(self._generation),
            name=f"termrelay-channel-{self._generation}",
        )
        logger.info("Connecting to %s", self._url)

    def disconnect(self) -> None:
        """Close the channel on purpose. No reconnect follows.

        Cancels an armed reconnect timer so that it cannot reopen the
        channel after an intentional shutdown. Safe to call repeatedly.
        """
        self._cancel_reconnect()
        self._generation += 1
        task, self._task = self._task, None
        self._channel = None
        if task is not None and not task.done():
            task.cancel()
        if self._state is not ConnectionState.DISCONNECTED:
            logger.info("Disconnected from %s", self._url)
        self._state = ConnectionState.DISCONNECTED

    async def send(self, text: str) -> None:
        """Send one command as a raw text frame.

        Raises:
            ConnectionNotOpenError: If the channel is not connected. The
                command is dropped, not queued.
            ChannelSendError: If the socket fails while sending.
        """
        if self._state is not ConnectionState.CONNECTED or self._channel is None:
            logger.warning("Channel is not open. Command not sent: %s", text)
            raise ConnectionNotOpenError("Channel is not open", url=self._url)
        try:
            await self._channel.send(text)
        except WebSocketException as e:
            raise ChannelSendError(f"Failed to send command: {e}", url=self._url) from e
        logger.debug("Sent command: %s", text[:50])

    async def _run_channel(self, generation: int) -> None:
        """Open the socket, forward its frames, then report how it ended."""
        code: int | None = None
        reason = ""
        try:
            async with self._connector(self._url) as channel:
                if generation != self._generation:
                    return
                self._channel = channel
                self._state = ConnectionState.CONNECTED
                logger.info("Connected to %s", self._url)
                self._on_event(ChannelOpened())

                async for frame in channel:
                    if generation != self._generation:
                        return
                    self._on_event(ChannelMessage(message=parse_frame(frame)))

                code = getattr(channel, "close_code", None)
                reason = getattr(channel, "close_reason", None) or ""
        except asyncio.CancelledError:
            raise
        except ConnectionClosedError as e:
            rcvd = e.rcvd
            self._fail(
                generation,
                str(e),
                code=rcvd.code if rcvd is not None else ABNORMAL_CLOSURE,
                reason=rcvd.reason if rcvd is not None else "",
            )
            return
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self._fail(generation, str(e) or type(e).__name__)
            return

        self._closed(generation, code, reason)

    def _fail(
        self,
        generation: int,
        detail: str,
        code: int | None = ABNORMAL_CLOSURE,
        reason: str = "",
    ) -> None:
        """Report a transport error, force the channel down, then close."""
        if generation != self._generation:
            logger.debug("Ignoring error from superseded channel: %s", detail)
            return
        logger.error("Channel error on %s: %s", self._url, detail)
        self._on_event(ChannelErrored(detail=detail))
        self._channel = None
        self._closed(generation, code, reason)

    def _closed(self, generation: int, code: int | None, reason: str) -> None:
        if generation != self._generation:
            logger.debug("Ignoring close of superseded channel (code=%s)", code)
            return
        self._channel = None
        self._task = None
        self._state = ConnectionState.DISCONNECTED
        logger.info(
            "Channel closed (code=%s, reason=%r), reconnecting in %.1fs",
            code, reason, self._reconnect_delay,
        )
        self._on_event(ChannelClosed(code=code, reason=reason))
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        self._cancel_reconnect()
        self._reconnect_handle = asyncio.get_running_loop().call_later(
            self._reconnect_delay, self._reconnect
        )

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        logger.info("Reconnecting to %s", self._url)
        self.connect()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
            logger.debug("Pending reconnect cancelled")


def parse_frame(frame: str | bytes) -> WireMessage:
    """Parse one inbound frame.

    A frame that is not a JSON object with optional string fields
    becomes a synthetic message carrying the parse error, so it renders
    like any other output.
    """
    try:
        return WireMessage.model_validate_json(frame)
    except ValidationError as e:
        detail = e.errors()[0]["msg"] if e.errors() else str(e)
        logger.warning("Failed to parse message from backend: %s (%r)", detail, frame[:100])
        return WireMessage(output=f"\r\nError parsing message from backend: {detail}\r\n")


class ConnectionManagerError(Exception):
    """Raised when the channel cannot carry a command."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class ConnectionNotOpenError(ConnectionManagerError):
    """Raised by send() while the channel is not connected."""


class ChannelSendError(ConnectionManagerError):
    """Raised when the socket fails during send()."""
