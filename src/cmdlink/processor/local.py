"""Built-in bot answering a handful of housekeeping commands.

Only commands registered in COMMANDS are executed. Each handler gets the
bot and the command arguments and returns the answer text.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from cmdlink import __version__
from cmdlink.processor.base import COMMAND_TRIGGER, Bot, BotStatus

logger = logging.getLogger(__name__)


def cmd_status(bot: LocalBot, args: list[str]) -> str:
    return f"<{bot.name}> Bot is running, uptime {bot.uptime_text()}."


def cmd_version(bot: LocalBot, args: list[str]) -> str:
    return f"<{bot.name}> cmdlink V{__version__}"


def cmd_echo(bot: LocalBot, args: list[str]) -> str:
    return " ".join(args)


def cmd_help(bot: LocalBot, args: list[str]) -> str:
    names = ", ".join(COMMAND_TRIGGER + name for name in sorted(COMMANDS))
    return f"<{bot.name}> Available commands: {names}"


COMMANDS: dict[str, Callable[[LocalBot, list[str]], str]] = {
    "status": cmd_status,
    "version": cmd_version,
    "echo": cmd_echo,
    "help": cmd_help,
}


class LocalBot(Bot):
    """A bot living in the host process itself."""

    def __init__(self, name: str = "local") -> None:
        super().__init__(name)
        self._started = time.monotonic()
        self._handled = 0

    def uptime_text(self) -> str:
        secs = int(time.monotonic() - self._started)
        h, rem = divmod(secs, 3600)
        m, s = divmod(rem, 60)
        return f"{h}h{m}m{s}s"

    def response(self, owner_id: int, command: str) -> str | None:
        if not command.startswith(COMMAND_TRIGGER):
            return None

        parts = command[len(COMMAND_TRIGGER):].split()
        if not parts:
            return None

        name, args = parts[0].lower(), parts[1:]
        handler = COMMANDS.get(name)
        if handler is None:
            return f"<{self.name}> Unknown command: {parts[0]}"

        self._handled += 1
        logger.debug("Bot %s executing %s for owner %d", self.name, name, owner_id)
        return handler(self, args)

    def status(self) -> BotStatus:
        return BotStatus(
            name=self.name,
            running=True,
            details={"uptime": self.uptime_text(), "handled": str(self._handled)},
        )
