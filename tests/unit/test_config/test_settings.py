"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from termrelay.config.settings import (
    DEFAULT_LEXICON,
    EndpointConfig,
    SessionConfig,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test away from any real .env file and TERMRELAY_ variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TERMRELAY_URL", raising=False)
    monkeypatch.delenv("TERMRELAY_HOST", raising=False)


class TestSettings:
    def test_default_settings(self) -> None:
        """Default Settings should be valid."""
        settings = Settings()
        assert settings.endpoint.port == 3000
        assert settings.endpoint.path == "/ws"
        assert settings.endpoint.secure is False
        assert settings.session.reconnect_delay == 5.0
        assert settings.logging.level == "WARNING"

    def test_session_config_defaults(self) -> None:
        config = SessionConfig()
        assert config.completion_cooldown == 0.3
        assert config.initial_cwd == "~"
        assert config.prompt_delimiter == "$ "
        assert config.lexicon == DEFAULT_LEXICON
        assert "clear" in config.lexicon

    def test_invalid_port_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EndpointConfig(port=70000)

    def test_non_positive_delay_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(reconnect_delay=0)

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMRELAY_ENDPOINT__PORT", "4100")
        assert Settings().endpoint.port == 4100


class TestLoadSettings:
    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        """load_settings with missing file should return defaults."""
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.endpoint.host == "localhost"

    def test_yaml_values_are_used(self, tmp_path: Path) -> None:
        path = tmp_path / "termrelay.yaml"
        path.write_text(
            "endpoint:\n"
            "  host: term.example.com\n"
            "  secure: true\n"
            "session:\n"
            "  lexicon: [deploy, status]\n"
            "  reconnect_delay: 2.5\n"
        )
        settings = load_settings(path)
        assert settings.endpoint.host == "term.example.com"
        assert settings.endpoint.secure is True
        assert settings.session.lexicon == ["deploy", "status"]
        assert settings.session.reconnect_delay == 2.5

    def test_flat_env_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMRELAY_HOST", "10.1.1.1")
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.endpoint.host == "10.1.1.1"

    def test_dotenv_file_is_read(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("# endpoint\nTERMRELAY_URL=wss://relay.example.com/ws\n")
        try:
            settings = load_settings(tmp_path / "nonexistent.yaml")
        finally:
            # _load_dotenv writes straight into os.environ
            os.environ.pop("TERMRELAY_URL", None)
        assert settings.endpoint.url == "wss://relay.example.com/ws"
