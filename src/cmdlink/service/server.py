"""FastAPI HTTP server for the remote command service.

Exposes two operations under the configured service path:

    GET  /<path>/GetStatus      -> {"status": "<json snapshot or {}>"}
    POST /<path>/HandleCommand  <- {"input": "status"}
                                -> {"output": "<bot answer>" | null}

The server runs uvicorn in a background thread so the host process keeps
control of its own main loop and can start and stop the service at will.
"""

from __future__ import annotations

import enum
import logging
import socket
import threading
import time

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel, Field

from cmdlink import __version__
from cmdlink.config.settings import DEFAULT_PATH, ServiceConfig
from cmdlink.endpoint.resolver import ConfigurationIncomplete, Endpoint, EndpointResolver
from cmdlink.processor.registry import BotRegistry
from cmdlink.service.handler import CommandHandler

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class CommandRequest(BaseModel):
    input: str | None = Field(default=None, description="Command text without the trigger prefix")


class CommandResponse(BaseModel):
    output: str | None = None


class StatusResponse(BaseModel):
    status: str


class ServiceState(str, enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class CommandServiceError(Exception):
    """Raised when the command service fails to come up."""


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(handler: CommandHandler, path: str = DEFAULT_PATH) -> FastAPI:
    """Create the command service application.

    Routes are plain ``def`` functions: FastAPI runs them in its worker
    threads and each request holds its thread until the bot answers.
    """
    app = FastAPI(
        title="cmdlink",
        description="Remote command service relaying text commands to bots",
        version=__version__,
    )
    app.state.handler = handler
    prefix = "/" + path.strip("/")

    @app.get(f"{prefix}/GetStatus")
    def get_status() -> StatusResponse:
        h: CommandHandler = app.state.handler
        return StatusResponse(status=h.get_status())

    @app.post(f"{prefix}/HandleCommand")
    def handle_command(request: CommandRequest) -> CommandResponse:
        h: CommandHandler = app.state.handler
        return CommandResponse(output=h.handle_command(request.input))

    return app


def _bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.set_inheritable(True)
    except BaseException:
        sock.close()
        raise
    return sock


# ---------------------------------------------------------------------------
# Service lifecycle
# ---------------------------------------------------------------------------

class CommandService:
    """Owns the listening socket and the uvicorn server for one endpoint.

    ``start()`` and ``stop()`` are idempotent and never raise; failures
    are logged and leave the service stopped.

    Usage::

        service = CommandService(settings.service, BotRegistry([LocalBot()]))
        service.start()
        ...
        service.stop()
    """

    def __init__(
        self,
        config: ServiceConfig,
        registry: BotRegistry,
        resolver: EndpointResolver | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver or EndpointResolver(config)
        self._handler = CommandHandler(registry, owner_id=config.owner_id)
        self._app = create_app(self._handler, path=config.path)
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._socket: socket.socket | None = None
        self._endpoint: Endpoint | None = None

    @property
    def state(self) -> ServiceState:
        return ServiceState.RUNNING if self._server is not None else ServiceState.STOPPED

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def endpoint(self) -> Endpoint | None:
        """Address actually listened on, with the real port if 0 was configured."""
        return self._endpoint

    @property
    def handler(self) -> CommandHandler:
        return self._handler

    @property
    def app(self) -> FastAPI:
        return self._app

    def start(self) -> None:
        """Bind the endpoint and serve it in a background thread."""
        if self.is_running:
            return

        try:
            endpoint = self._resolver.resolve()
        except ConfigurationIncomplete as e:
            logger.warning("Command server not started: %s", e)
            return

        logger.info("Starting command server on %s...", endpoint.url)
        if not self._config.secure:
            logger.warning(
                "Transport security is disabled: commands and answers are neither "
                "encrypted nor authenticated. Only expose %s on a trusted network.",
                endpoint.base_url,
            )

        sock: socket.socket | None = None
        server: uvicorn.Server | None = None
        thread: threading.Thread | None = None
        try:
            sock = _bind_socket(endpoint.host, endpoint.port)
            server = uvicorn.Server(self._uvicorn_config())
            server.config.load()
            thread = threading.Thread(
                target=server.run,
                kwargs={"sockets": [sock]},
                name="cmdlink-server",
                daemon=True,
            )
            thread.start()
            self._wait_started(server, thread)
        except PermissionError:
            logger.error(
                "Command service could not be started because access to %s was denied!",
                endpoint.url,
            )
            logger.warning(
                "If you want to use the command service, consider running with elevated "
                "privileges, choosing an unprivileged port, or adding a firewall exception!"
            )
            self._abort_start(sock, server, thread)
            return
        except Exception:
            logger.exception("Command service could not be started on %s", endpoint.url)
            self._abort_start(sock, server, thread)
            return

        self._socket = sock
        self._server = server
        self._thread = thread
        self._endpoint = endpoint.with_port(sock.getsockname()[1])
        logger.info("Command server ready on %s!", self._endpoint.url)

    def stop(self) -> None:
        """Shut the server down; the service ends up stopped even if closing fails."""
        if not self.is_running:
            return

        logger.info("Stopping command server on %s...", self._endpoint.url)
        try:
            self._server.should_exit = True
            self._thread.join(timeout=self._config.startup_timeout)
            if self._thread.is_alive():
                logger.warning("Command server thread did not exit in time")
            self._socket.close()
        except Exception:
            logger.exception("Error while stopping command server")
        finally:
            self._server = None
            self._thread = None
            self._socket = None
            self._endpoint = None
        logger.info("Command server stopped")

    def wait(self) -> None:
        """Block until the server thread exits (e.g. after stop())."""
        while self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=0.5)

    def __enter__(self) -> CommandService:
        self.start()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.stop()

    def _uvicorn_config(self) -> uvicorn.Config:
        ssl_kwargs = {}
        if self._config.secure:
            if not (self._config.ssl_certfile and self._config.ssl_keyfile):
                raise CommandServiceError("Secure mode requires ssl_certfile and ssl_keyfile")
            ssl_kwargs = {
                "ssl_certfile": self._config.ssl_certfile,
                "ssl_keyfile": self._config.ssl_keyfile,
            }
        return uvicorn.Config(
            self._app,
            log_config=None,
            access_log=False,
            lifespan="off",
            **ssl_kwargs,
        )

    def _wait_started(self, server: uvicorn.Server, thread: threading.Thread) -> None:
        deadline = time.monotonic() + self._config.startup_timeout
        while not server.started:
            if not thread.is_alive():
                raise CommandServiceError("Server thread exited during startup")
            if time.monotonic() > deadline:
                raise CommandServiceError(
                    f"Server did not start within {self._config.startup_timeout}s"
                )
            time.sleep(_POLL_INTERVAL)

    @staticmethod
    def _abort_start(
        sock: socket.socket | None,
        server: uvicorn.Server | None,
        thread: threading.Thread | None,
    ) -> None:
        if server is not None and thread is not None and thread.is_alive():
            server.should_exit = True
            thread.join(timeout=5.0)
        if sock is not None:
            try:
                sock.close()
            except OSError as e:
                logger.debug("Closing socket after failed start: %s", e)
