"""The two operations the command service exposes to remote callers."""

from __future__ import annotations

import logging
import threading

from cmdlink.processor.base import COMMAND_TRIGGER
from cmdlink.processor.registry import BotRegistry
from cmdlink.utils.logging import log_null_error

logger = logging.getLogger(__name__)

EMPTY_STATUS = "{}"
REFUSAL_NO_OWNER = "Refusing to handle request because owner id is not set!"
ERROR_NO_BOTS = "ERROR: No bots are enabled!"


class CommandHandler:
    """Routes remote commands to the first available bot.

    Commands are executed one at a time. ``handle_command`` blocks the
    calling thread until the bot has answered; there is no timeout and no
    way to cancel a dispatched command.

    Args:
        registry: The bots commands can be dispatched to.
        owner_id: Identity commands are executed as. 0 refuses everything.
    """

    def __init__(self, registry: BotRegistry, owner_id: int = 0) -> None:
        self._registry = registry
        self._owner_id = owner_id
        self._dispatch_lock = threading.Lock()

    @property
    def owner_id(self) -> int:
        return self._owner_id

    def get_status(self) -> str:
        if self._owner_id == 0:
            return EMPTY_STATUS
        try:
            return self._registry.get_api_status()
        except Exception:
            logger.exception("Failed to collect bot status")
            return EMPTY_STATUS

    def handle_command(self, input: str | None) -> str | None:
        if not input:
            log_null_error(logger, "input")
            return None

        if self._owner_id == 0:
            return REFUSAL_NO_OWNER

        bot = self._registry.first()
        if bot is None:
            return ERROR_NO_BOTS

        command = COMMAND_TRIGGER + input

        with self._dispatch_lock:
            try:
                output = bot.response(self._owner_id, command)
            except Exception:
                logger.exception("Bot %s failed to answer command: %s", bot.name, input)
                return None

        logger.info("Answered to command: %s with: %s", input, output)
        return output
