"""Resolution of the executor's WebSocket endpoint URL."""

from __future__ import annotations

from urllib.parse import urlsplit

from termrelay.config.settings import EndpointConfig

DEFAULT_PORT = 3000
DEFAULT_PATH = "/ws"


def build_url(
    host: str,
    port: int = DEFAULT_PORT,
    path: str = DEFAULT_PATH,
    secure: bool = False,
) -> str:
    """Build ``ws://host:port/path`` (``wss://`` when secure)."""
    scheme = "wss" if secure else "ws"
    if not path.startswith("/"):
        path = "/" + path
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"  # IPv6 literal
    return f"{scheme}://{host}:{port}{path}"


def endpoint_from_location(
    location: str,
    port: int = DEFAULT_PORT,
    path: str = DEFAULT_PATH,
) -> str:
    """Mirror a page location: same hostname, secure channel for https pages.

    Example::

        endpoint_from_location("https://example.com/app")
        # -> "wss://example.com:3000/ws"
    """
    parts = urlsplit(location)
    if not parts.hostname:
        raise ValueError(f"Location has no hostname: {location!r}")
    return build_url(parts.hostname, port=port, path=path, secure=parts.scheme == "https")


def resolve_url(config: EndpointConfig) -> str:
    """Endpoint URL for a configuration; an explicit ``url`` wins."""
    if config.url:
        return config.url
    return build_url(config.host, port=config.port, path=config.path, secure=config.secure)
