"""Configuration management for cmdlink.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides such as the owner id.
"""

from cmdlink.config.settings import (
    ClientConfig,
    LoggingConfig,
    ServiceConfig,
    Settings,
    load_settings,
)

__all__ = ["ClientConfig", "LoggingConfig", "ServiceConfig", "Settings", "load_settings"]
