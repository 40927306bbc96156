"""Interactive operator prompts."""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class UserInputType(str, enum.Enum):
    """What the operator is being asked for."""

    SERVICE_HOSTNAME = "service_hostname"


PROMPTS = {
    UserInputType.SERVICE_HOSTNAME: (
        "Please enter the hostname of the command service "
        "(e.g. 127.0.0.1, leave empty to skip): "
    ),
}


def get_user_input(kind: UserInputType) -> str:
    """Ask the operator for a value on the console.

    Returns an empty string if stdin is closed or the operator aborts.
    """
    try:
        value = input(PROMPTS[kind])
    except (EOFError, KeyboardInterrupt):
        print()
        logger.debug("No console input available for %s", kind.value)
        return ""
    return value.strip()
