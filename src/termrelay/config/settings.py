"""Configuration management for termrelay.

Loads settings from a YAML configuration file with environment variable
overrides for the endpoint. Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/termrelay.yaml")

DEFAULT_LEXICON = [
    "help", "echo", "clear", "about", "pwd", "whoami", "cd", "ls",
    "birthday", "heyeuuu", "creeper",
]


class EndpointConfig(BaseModel):
    host: str = Field(default="localhost")
    port: int = Field(default=3000, ge=1, le=65535)
    path: str = Field(default="/ws")
    secure: bool = Field(default=False, description="Use wss:// instead of ws://")
    url: str | None = Field(default=None, description="Full URL; overrides host/port/path")


class SessionConfig(BaseModel):
    lexicon: list[str] = Field(default_factory=lambda: list(DEFAULT_LEXICON))
    completion_cooldown: float = Field(default=0.3, gt=0)
    reconnect_delay: float = Field(default=5.0, gt=0)
    initial_cwd: str = Field(default="~")
    prompt_delimiter: str = Field(default="$ ")
    banner: list[str] = Field(
        default_factory=lambda: [
            "Connection established with the backend!",
            'Type "help" (or any command) and press Enter.',
        ],
    )


class LoggingConfig(BaseModel):
    level: str = Field(default="WARNING")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for termrelay.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "TERMRELAY_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply flat TERMRELAY_URL / TERMRELAY_HOST overrides to the endpoint section."""
    url = os.environ.get("TERMRELAY_URL", "")
    host = os.environ.get("TERMRELAY_HOST", "")

    if not url and not host:
        return

    endpoint = yaml_data.setdefault("endpoint", {})
    if url:
        endpoint["url"] = url
    if host:
        endpoint["host"] = host
