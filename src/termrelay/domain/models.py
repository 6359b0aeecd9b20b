"""Core domain models for the termrelay system.

These models represent the data flowing through a session: classified
keystrokes, completion results, wire messages from the remote executor,
and the typed events the session orchestrator consumes.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ConnectionState(str, enum.Enum):
    """Externally observable state of the duplex channel."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class KeyKind(str, enum.Enum):
    """Classification of a single input event."""

    COMMIT = "commit"  # Enter (CR)
    ERASE = "erase"  # Backspace / DEL
    COMPLETE = "complete"  # Tab
    INTERRUPT = "interrupt"  # Ctrl+C
    END_OF_SESSION = "end_of_session"  # Ctrl+D
    PRINTABLE = "printable"  # Text to append (including LF)
    IGNORED = "ignored"  # Other control codes, escape sequences


# ---------------------------------------------------------------------------
# Wire Models
# ---------------------------------------------------------------------------


class WireMessage(BaseModel):
    """A frame received from the remote executor.

    Both fields are independently optional. Absence of a field means
    "no output" or "no cwd change", not an error.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    output: str | None = Field(default=None, description="Text to render in the terminal")
    cwd_update: str | None = Field(
        default=None, description="New working directory to show in the prompt"
    )


# ---------------------------------------------------------------------------
# Session State
# ---------------------------------------------------------------------------


class SessionState(BaseModel):
    """Client-side display state of one terminal session.

    ``cwd`` is only ever changed by a cwd update from the remote side.
    ``input_enabled`` gates whether keystrokes have any effect.
    """

    cwd: str = Field(default="~", description="Working directory shown in the prompt")
    connection_state: ConnectionState = Field(default=ConnectionState.DISCONNECTED)
    input_enabled: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Completion Results (discriminated union)
# ---------------------------------------------------------------------------


class NoMatch(BaseModel):
    """No lexicon entry matches the current line."""

    model_config = ConfigDict(frozen=True)

    result_type: Literal["no_match"] = "no_match"


class Unique(BaseModel):
    """Exactly one lexicon entry matches; the line becomes that entry."""

    model_config = ConfigDict(frozen=True)

    result_type: Literal["unique"] = "unique"
    text: str


class Cycle(BaseModel):
    """Several entries match; ``text`` is the one selected by this trigger."""

    model_config = ConfigDict(frozen=True)

    result_type: Literal["cycle"] = "cycle"
    text: str
    candidates: tuple[str, ...]
    fresh: bool = Field(description="True when the candidate list was just recomputed")


CompletionResult = Annotated[
    Union[NoMatch, Unique, Cycle],
    Field(discriminator="result_type"),
]


# ---------------------------------------------------------------------------
# Session Events (discriminated union)
# ---------------------------------------------------------------------------


class KeyInput(BaseModel):
    """One key event from the terminal (a character or an escape sequence)."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["key_input"] = "key_input"
    data: str


class ChannelOpened(BaseModel):
    """The duplex channel finished its handshake."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["channel_opened"] = "channel_opened"


class ChannelMessage(BaseModel):
    """A frame from the remote executor, already parsed."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["channel_message"] = "channel_message"
    message: WireMessage


class ChannelClosed(BaseModel):
    """The channel closed, cleanly or not."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["channel_closed"] = "channel_closed"
    code: int | None = None
    reason: str = ""


class ChannelErrored(BaseModel):
    """A transport-level failure on the channel."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["channel_errored"] = "channel_errored"
    detail: str = ""


ChannelEvent = Union[ChannelOpened, ChannelMessage, ChannelClosed, ChannelErrored]

SessionEvent = Annotated[
    Union[KeyInput, ChannelOpened, ChannelMessage, ChannelClosed, ChannelErrored],
    Field(discriminator="event_type"),
]
