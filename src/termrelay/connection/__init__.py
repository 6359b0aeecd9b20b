"""Duplex channel management for termrelay.

Public API:
    ConnectionManager -- Owns the WebSocket, reconnects after closure
    ConnectionManagerError -- Base error for send failures
    ConnectionNotOpenError -- send() while disconnected
    resolve_url / build_url / endpoint_from_location -- Endpoint resolution
"""

from termrelay.connection.endpoint import build_url, endpoint_from_location, resolve_url

__all__ = [
    "ChannelSendError",
    "ConnectionManager",
    "ConnectionManagerError",
    "ConnectionNotOpenError",
    "build_url",
    "endpoint_from_location",
    "resolve_url",
]

_MANAGER_NAMES = {
    "ChannelSendError",
    "ConnectionManager",
    "ConnectionManagerError",
    "ConnectionNotOpenError",
}


def __getattr__(name: str) -> type:
    """Lazy import for the manager, which requires the websockets package."""
    if name in _MANAGER_NAMES:
        from termrelay.connection import manager
        return getattr(manager, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
