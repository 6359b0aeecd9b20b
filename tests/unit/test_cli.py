"""Tests for the command-line interface."""

from __future__ import annotations

import pytest

from termrelay.cli import apply_connect_args, main, parse_args
from termrelay.config.settings import Settings


class TestParseArgs:
    def test_no_command(self) -> None:
        args = parse_args([])
        assert args.command is None
        assert args.verbose is False

    def test_connect_flags(self) -> None:
        args = parse_args(["-v", "connect", "--host", "box", "--port", "4000", "--secure"])
        assert args.command == "connect"
        assert args.verbose is True
        assert args.host == "box"
        assert args.port == 4000
        assert args.secure is True


class TestApplyConnectArgs:
    def test_defaults(self) -> None:
        url = apply_connect_args(Settings(), parse_args(["connect"]))
        assert url == "ws://localhost:3000/ws"

    def test_host_port_secure(self) -> None:
        args = parse_args(["connect", "--host", "box", "--port", "4000", "--secure"])
        assert apply_connect_args(Settings(), args) == "wss://box:4000/ws"

    def test_origin_is_mirrored(self) -> None:
        args = parse_args(["connect", "--origin", "https://term.example.com/page"])
        assert apply_connect_args(Settings(), args) == "wss://term.example.com:3000/ws"

    def test_url_overrides_everything(self) -> None:
        args = parse_args(["connect", "--url", "ws://x:1/y", "--origin", "https://a"])
        assert apply_connect_args(Settings(), args) == "ws://x:1/y"


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main([])
        assert "connect" in capsys.readouterr().out
