"""Configuration management for cmdlink.

Loads settings from a YAML configuration file with environment variable
overrides (``CMDLINK_SERVICE__OWNER_ID=...``). Supports .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/cmdlink.yaml")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 1242
DEFAULT_PATH = "ASF"
DEFAULT_SEND_TIMEOUT = 300.0


class ServiceConfig(BaseModel):
    # An empty host makes the endpoint resolver ask the operator for one.
    host: str = Field(default=DEFAULT_HOST)
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    path: str = Field(default=DEFAULT_PATH, min_length=1)
    owner_id: int = Field(default=0, ge=0, description="0 refuses all commands")
    secure: bool = Field(default=False, description="Serve over TLS")
    ssl_certfile: str | None = Field(default=None)
    ssl_keyfile: str | None = Field(default=None)
    startup_timeout: float = Field(default=10.0, gt=0)


class ClientConfig(BaseModel):
    send_timeout: float = Field(default=DEFAULT_SEND_TIMEOUT, gt=0)
    ca_file: str | None = Field(default=None)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for cmdlink.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "CMDLINK_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment must win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
