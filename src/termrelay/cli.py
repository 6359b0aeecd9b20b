"""Command-line interface for termrelay.

Provides the main entry point for starting an interactive session
against a remote command executor.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termrelay",
        description="Interactive terminal front-end for a remote command executor",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/termrelay.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    connect_parser = subparsers.add_parser("connect", help="Start an interactive session")
    connect_parser.add_argument(
        "--url", type=str, default=None,
        help="Full WebSocket URL (overrides host, port and --secure)",
    )
    connect_parser.add_argument(
        "--origin", type=str, default=None,
        help="Page location to mirror, e.g. https://example.com (host + scheme)",
    )
    connect_parser.add_argument("--host", type=str, default=None, help="Executor host")
    connect_parser.add_argument("--port", type=int, default=None, help="Executor port")
    connect_parser.add_argument(
        "--secure", action="store_true",
        help="Use a secure (wss://) channel",
    )

    return parser.parse_args(argv)


def apply_connect_args(settings, args: argparse.Namespace) -> str:
    """Fold connect flags into the endpoint settings and return the URL."""
    from termrelay.connection.endpoint import endpoint_from_location, resolve_url

    ep = settings.endpoint
    if args.host:
        ep.host = args.host
    if args.port:
        ep.port = args.port
    if args.secure:
        ep.secure = True
    if args.url:
        ep.url = args.url
    elif args.origin:
        ep.url = endpoint_from_location(args.origin, port=ep.port, path=ep.path)
    return resolve_url(ep)


async def _run_session(settings, url: str) -> None:
    """Build the renderer, session and keystroke source, then run."""
    from termrelay.keyboard.tty import KeystrokeSource
    from termrelay.render.terminal import TerminalRenderer
    from termrelay.session.orchestrator import SessionOrchestrator
    from termrelay.utils.logging import console_suspended

    renderer = TerminalRenderer()
    s = settings.session
    session = SessionOrchestrator(
        renderer=renderer,
        url=url,
        lexicon=s.lexicon,
        completion_cooldown=s.completion_cooldown,
        reconnect_delay=s.reconnect_delay,
        initial_cwd=s.initial_cwd,
        prompt_delimiter=s.prompt_delimiter,
        banner=s.banner,
    )

    renderer.write(f"Connecting to {url}...\n")
    try:
        with console_suspended(), KeystrokeSource(on_event=session.post, on_hangup=session.stop):
            await session.run()
    finally:
        renderer.restore()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the termrelay CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from termrelay.config.settings import load_settings
    from termrelay.keyboard.tty import KeystrokeSourceError
    from termrelay.render.base import RendererError
    from termrelay.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "connect":
        url = apply_connect_args(settings, args)
        logger.info("Starting session against %s", url)
        try:
            asyncio.run(_run_session(settings, url))
        except KeystrokeSourceError as e:
            print(f"termrelay: {e} (an interactive terminal is required)", file=sys.stderr)
            sys.exit(2)
        except RendererError as e:
            print(f"termrelay: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
