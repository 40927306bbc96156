"""Abstract base class for command-processing bots.

The command service only relies on this interface, so any bot
implementation (a chat bot, a game client, the built-in LocalBot) can be
registered and driven remotely.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Prefix marking text as a command rather than plain chat.
COMMAND_TRIGGER = "!"


class BotStatus(BaseModel):
    """Snapshot of a single bot, as reported by GetStatus."""

    name: str
    running: bool = True
    details: dict[str, str] = Field(default_factory=dict)


class Bot(ABC):
    """Abstract interface for something that answers commands.

    Example usage::

        bot = LocalBot("main")
        answer = bot.response(owner_id=42, command="!status")
    """

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("Bot name must not be empty")
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def response(self, owner_id: int, command: str) -> str | None:
        """Execute a command on behalf of ``owner_id`` and return the answer.

        This call is synchronous and may take arbitrarily long; the
        command service blocks on it.

        Args:
            owner_id: Identity the command is executed as.
            command: Command text including the trigger prefix, e.g. ``!status``.

        Returns:
            The answer text, or None if the bot has nothing to say.
        """
        ...

    def status(self) -> BotStatus:
        """Describe the bot for the status snapshot."""
        return BotStatus(name=self._name)
