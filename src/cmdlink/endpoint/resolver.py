"""Endpoint resolution from configuration.

The endpoint is built once from the service configuration and cached.
Later configuration changes are only picked up after ``reset()``.
"""

from __future__ import annotations

import logging
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from cmdlink.config.settings import ServiceConfig
from cmdlink.utils.console import UserInputType, get_user_input

logger = logging.getLogger(__name__)

PLAIN_SCHEME = "http"
SECURE_SCHEME = "https"


class ConfigurationIncomplete(Exception):
    """Raised when the endpoint cannot be built because a value is missing."""

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class Endpoint(BaseModel):
    """Network address of the command service."""

    model_config = ConfigDict(frozen=True)

    scheme: str = Field(default=PLAIN_SCHEME, description="Transport identifier")
    host: str = Field(min_length=1)
    port: int = Field(ge=0, le=65535)
    path: str = Field(min_length=1)

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}/{self.path}"

    @property
    def base_url(self) -> str:
        return self.url.rsplit("/", 1)[0]

    def with_port(self, port: int) -> Endpoint:
        return self.model_copy(update={"port": port})

    def __str__(self) -> str:
        return self.url


class EndpointResolver:
    """Builds and caches the :class:`Endpoint` for a service configuration.

    Args:
        config: Service section of the settings. An accepted host typed
            by the operator is written back into it.
        prompt: Asks the operator for a value; defaults to the console.
    """

    def __init__(
        self,
        config: ServiceConfig,
        prompt: Callable[[UserInputType], str] = get_user_input,
    ) -> None:
        self._config = config
        self._prompt = prompt
        self._endpoint: Endpoint | None = None

    @property
    def endpoint(self) -> Endpoint | None:
        return self._endpoint

    def resolve(self) -> Endpoint:
        """Return the cached endpoint, building it on first use.

        Raises:
            ConfigurationIncomplete: No host configured and the operator
                did not provide one.
        """
        if self._endpoint is not None:
            return self._endpoint

        if not self._config.host:
            host = (self._prompt(UserInputType.SERVICE_HOSTNAME) or "").strip()
            if not host:
                raise ConfigurationIncomplete("No service host configured", field="host")
            self._config.host = host

        path = self._config.path.strip("/")
        if not path:
            raise ConfigurationIncomplete(
                f"Service path {self._config.path!r} is empty", field="path"
            )

        self._endpoint = Endpoint(
            scheme=SECURE_SCHEME if self._config.secure else PLAIN_SCHEME,
            host=self._config.host,
            port=self._config.port,
            path=path,
        )
        logger.debug("Resolved command endpoint %s", self._endpoint.url)
        return self._endpoint

    def reset(self) -> None:
        """Forget the cached endpoint so the next resolve() rereads config."""
        self._endpoint = None
