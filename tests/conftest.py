"""Shared test fixtures for the cmdlink test suite.

Provides common fixtures used across unit and integration tests:
recording bots, registries, service configuration on ephemeral ports.
"""

from __future__ import annotations

import socket
import threading

import pytest

from cmdlink.config.settings import ServiceConfig
from cmdlink.processor.base import Bot, BotStatus
from cmdlink.processor.registry import BotRegistry


class RecordingBot(Bot):
    """Bot that remembers every command it was given."""

    def __init__(self, name: str, answer: str | None = "ok") -> None:
        super().__init__(name)
        self.answer = answer
        self.calls: list[tuple[int, str]] = []
        self.release: threading.Event | None = None

    def response(self, owner_id: int, command: str) -> str | None:
        self.calls.append((owner_id, command))
        if self.release is not None:
            self.release.wait(timeout=5.0)
        return self.answer

    def status(self) -> BotStatus:
        return BotStatus(name=self.name, details={"calls": str(len(self.calls))})


# ---------------------------------------------------------------------------
# Bot Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bot() -> RecordingBot:
    """A single recording bot answering 'ok'."""
    return RecordingBot("main")


@pytest.fixture
def registry(bot: RecordingBot) -> BotRegistry:
    """A registry holding the recording bot."""
    return BotRegistry([bot])


# ---------------------------------------------------------------------------
# Network Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def service_config() -> ServiceConfig:
    """Service configuration on an ephemeral localhost port with an owner set."""
    return ServiceConfig(host="127.0.0.1", port=0, owner_id=42, startup_timeout=5.0)


@pytest.fixture
def unused_port() -> int:
    """A localhost port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def bot_factory() -> type[RecordingBot]:
    """The RecordingBot class, for tests that need several bots."""
    return RecordingBot
