"""Configuration management for termrelay.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for the endpoint address.
"""

from termrelay.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
