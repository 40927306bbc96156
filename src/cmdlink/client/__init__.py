"""Command client for cmdlink.

Relays a locally typed command to a (possibly remote) command service
and returns its answer.
"""

from cmdlink.client.http_client import ClientState, CommandClient

__all__ = ["ClientState", "CommandClient"]
