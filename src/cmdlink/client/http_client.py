"""HTTP command client.

Sends commands as HTTP requests to the command service. Failures never
reach the caller: they are logged and turned into a ``None`` result.
"""

from __future__ import annotations

import enum
import logging
import ssl

import httpx

from cmdlink.config.settings import DEFAULT_SEND_TIMEOUT
from cmdlink.endpoint.resolver import ConfigurationIncomplete, Endpoint, EndpointResolver
from cmdlink.utils.logging import log_null_error

logger = logging.getLogger(__name__)


class ClientState(str, enum.Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class CommandClient:
    """Sends commands to the command service over HTTP.

    The underlying connection is created on the first call and reused
    until :meth:`close`.

    Args:
        endpoint: Address of the service. If omitted, ``resolver`` is
            asked for it on first use.
        resolver: Builds the endpoint lazily from configuration.
        timeout: Seconds a single call may take before it is reported
            as a transport error.
        verify: TLS verification for secure endpoints (True, False, or
            an SSL context trusting a private CA).
    """

    def __init__(
        self,
        endpoint: Endpoint | None = None,
        resolver: EndpointResolver | None = None,
        timeout: float = DEFAULT_SEND_TIMEOUT,
        verify: bool | ssl.SSLContext = True,
    ) -> None:
        if endpoint is None and resolver is None:
            raise ValueError("Either endpoint or resolver is required")
        self._endpoint = endpoint
        self._resolver = resolver
        self._timeout = timeout
        self._verify = verify
        self._client: httpx.Client | None = None
        self._closed = False

    @property
    def state(self) -> ClientState:
        if self._client is not None:
            return ClientState.CONNECTED
        return ClientState.CLOSED if self._closed else ClientState.UNCONNECTED

    @property
    def endpoint(self) -> Endpoint | None:
        return self._endpoint

    def send(self, input: str | None) -> str | None:
        """Run a command on the remote service and return its answer."""
        if not input:
            log_null_error(logger, "input")
            return None

        target = self._endpoint.url if self._endpoint is not None else "unresolved endpoint"
        logger.info("Sending command: %s to command server on %s...", input, target)

        client = self._connect()
        if client is None:
            return None

        try:
            resp = client.post("HandleCommand", json={"input": input})
            resp.raise_for_status()
            return resp.json().get("output")
        except Exception:
            logger.exception("Command %s to %s failed", input, self._endpoint.url)
            return None

    def get_status(self) -> str | None:
        """Fetch the status snapshot from the remote service."""
        client = self._connect()
        if client is None:
            return None

        try:
            resp = client.get("GetStatus")
            resp.raise_for_status()
            return resp.json().get("status")
        except Exception:
            logger.exception("Status request to %s failed", self._endpoint.url)
            return None

    def close(self) -> None:
        """Close the HTTP client. Safe to call multiple times."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._closed = True
            logger.debug("Disconnected from %s", self._endpoint.url)

    def _connect(self) -> httpx.Client | None:
        if self._client is not None:
            return self._client

        if self._endpoint is None:
            try:
                self._endpoint = self._resolver.resolve()
            except ConfigurationIncomplete as e:
                logger.warning("Cannot send command: %s", e)
                return None

        self._client = httpx.Client(
            base_url=self._endpoint.url + "/",
            timeout=self._timeout,
            verify=self._verify,
        )
        self._closed = False
        logger.debug("Connected to command server on %s", self._endpoint.url)
        return self._client

    def __enter__(self) -> CommandClient:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()
