"""Domain models for termrelay.

This package contains the core data structures, enumerations, and event
types used throughout the system. All models use Pydantic v2 for
validation and serialization.
"""

from termrelay.domain.models import (
    ChannelClosed,
    ChannelErrored,
    ChannelEvent,
    ChannelMessage,
    ChannelOpened,
    CompletionResult,
    ConnectionState,
    Cycle,
    KeyInput,
    KeyKind,
    NoMatch,
    SessionEvent,
    SessionState,
    Unique,
    WireMessage,
)

__all__ = [
    "ChannelClosed",
    "ChannelErrored",
    "ChannelEvent",
    "ChannelMessage",
    "ChannelOpened",
    "CompletionResult",
    "ConnectionState",
    "Cycle",
    "KeyInput",
    "KeyKind",
    "NoMatch",
    "SessionEvent",
    "SessionState",
    "Unique",
    "WireMessage",
]
