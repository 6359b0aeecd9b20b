"""Shared test fixtures for the termrelay test suite.

Provides common fixtures used across unit tests: a lexicon, a renderer
that records every call, a fake WebSocket connector, and helpers for
letting the event loop run pending callbacks.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import pytest

from termrelay.render.base import Renderer
from termrelay.session.orchestrator import SessionOrchestrator


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class RecordingRenderer(Renderer):
    """Renderer that records calls in order instead of drawing anything."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self._input_enabled = False

    @property
    def input_enabled(self) -> bool:
        return self._input_enabled

    def write(self, text: str) -> None:
        self.calls.append(("write", text))

    def clear_view(self) -> None:
        self.calls.append(("clear", None))

    def set_input_enabled(self, enabled: bool) -> None:
        self._input_enabled = enabled
        self.calls.append(("input", enabled))

    def focus(self) -> None:
        self.calls.append(("focus", None))

    @property
    def output(self) -> str:
        """Everything written, concatenated."""
        return "".join(str(arg) for kind, arg in self.calls if kind == "write")

    def reset(self) -> None:
        self.calls.clear()


# ---------------------------------------------------------------------------
# Fake WebSocket
# ---------------------------------------------------------------------------


_CLOSE = object()


class FakeChannel:
    """Stands in for a websockets client connection.

    Frames and failures are queued with feed()/fail()/close_from_server()
    and come out of the async iterator in order.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.sent: list[str] = []
        self.closed = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self._frames: asyncio.Queue[object] = asyncio.Queue()

    def feed(self, frame: str | bytes) -> None:
        self._frames.put_nowait(frame)

    def fail(self, exc: BaseException) -> None:
        self._frames.put_nowait(exc)

    def close_from_server(self, code: int = 1000, reason: str = "") -> None:
        self.close_code = code
        self.close_reason = reason
        self._frames.put_nowait(_CLOSE)

    async def send(self, text: str) -> None:
        self.sent.append(text)

    async def __aenter__(self) -> FakeChannel:
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.closed = True

    def __aiter__(self) -> FakeChannel:
        return self

    async def __anext__(self) -> str | bytes:
        item = await self._frames.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item  # type: ignore[return-value]


class _FailingConnect:
    def __init__(self, exc: BaseException) -> None:
        self._exc = exc

    async def __aenter__(self) -> None:
        raise self._exc

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class FakeConnector:
    """Replacement for ``websockets.connect`` that records each attempt."""

    def __init__(self) -> None:
        self.urls: list[str] = []
        self.channels: list[FakeChannel] = []
        self.fail_with: BaseException | None = None

    def __call__(self, url: str) -> FakeChannel | _FailingConnect:
        self.urls.append(url)
        if self.fail_with is not None:
            return _FailingConnect(self.fail_with)
        channel = FakeChannel(url)
        self.channels.append(channel)
        return channel

    @property
    def attempts(self) -> int:
        return len(self.urls)

    @property
    def latest(self) -> FakeChannel:
        return self.channels[-1]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def lexicon() -> list[str]:
    """A lexicon with a multi-candidate prefix ("cl") and unique ones."""
    return ["help", "clear", "cls", "cd", "ls", "pwd"]


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def clock() -> list[float]:
    """A controllable clock; tests set ``clock[0]`` and the session reads it."""
    return [100.0]


@pytest.fixture
def session(
    renderer: RecordingRenderer,
    connector: FakeConnector,
    lexicon: list[str],
    clock: list[float],
) -> SessionOrchestrator:
    """A session wired to the recording renderer and fake connector."""
    return SessionOrchestrator(
        renderer=renderer,
        url="ws://localhost:3000/ws",
        lexicon=lexicon,
        reconnect_delay=0.05,
        banner=["Welcome"],
        connector=connector,
        clock=lambda: clock[0],
    )


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    """Let pending tasks and callbacks on the event loop run."""

    async def _settle() -> None:
        for _ in range(10):
            await asyncio.sleep(0)

    return _settle


@pytest.fixture
def drain() -> Callable[[SessionOrchestrator], Awaitable[None]]:
    """Dispatch every event currently queued on a session."""

    async def _drain(session: SessionOrchestrator) -> None:
        queue = session._queue
        while not queue.empty():
            event = queue.get_nowait()
            if event is not None:
                await session.dispatch(event)

    return _drain
