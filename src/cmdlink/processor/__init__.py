"""Command processing for cmdlink.

Bots own the logic that executes a ``!``-prefixed command string and
returns a textual answer. The registry is the managed collection the
command service picks a bot from.

Public API:
    Bot -- Abstract base class
    BotRegistry -- Bots keyed by identifier
    LocalBot -- Built-in bot answering a few housekeeping commands
"""

from cmdlink.processor.base import COMMAND_TRIGGER, Bot, BotStatus
from cmdlink.processor.local import LocalBot
from cmdlink.processor.registry import BotRegistry

__all__ = ["COMMAND_TRIGGER", "Bot", "BotRegistry", "BotStatus", "LocalBot"]
