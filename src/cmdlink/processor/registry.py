"""Managed collection of bots, keyed by identifier."""

from __future__ import annotations

import logging
import threading

from pydantic import BaseModel, Field

from cmdlink.processor.base import Bot, BotStatus

logger = logging.getLogger(__name__)


class ApiStatus(BaseModel):
    bots: dict[str, BotStatus] = Field(default_factory=dict)


class BotRegistry:
    """Thread-safe mapping of bot name to :class:`Bot`."""

    def __init__(self, bots: list[Bot] | None = None) -> None:
        self._lock = threading.Lock()
        self._bots: dict[str, Bot] = {}
        for bot in bots or []:
            self.add(bot)

    def __len__(self) -> int:
        return len(self._bots)

    def __contains__(self, name: object) -> bool:
        return name in self._bots

    def add(self, bot: Bot) -> None:
        with self._lock:
            if bot.name in self._bots:
                raise ValueError(f"Bot {bot.name!r} is already registered")
            self._bots[bot.name] = bot
        logger.info("Registered bot %s", bot.name)

    def remove(self, name: str) -> Bot | None:
        with self._lock:
            bot = self._bots.pop(name, None)
        if bot is not None:
            logger.info("Unregistered bot %s", name)
        return bot

    def get(self, name: str) -> Bot | None:
        return self._bots.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._bots)

    def first(self) -> Bot | None:
        """Return the bot whose name sorts first, or None if there are none."""
        with self._lock:
            if not self._bots:
                return None
            return self._bots[min(self._bots)]

    def get_api_status(self) -> str:
        """JSON snapshot of every registered bot."""
        with self._lock:
            bots = {name: self._bots[name].status() for name in sorted(self._bots)}
        return ApiStatus(bots=bots).model_dump_json()
