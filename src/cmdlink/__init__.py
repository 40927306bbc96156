"""cmdlink -- remote command channel for a bot host process.

A host process exposes a small HTTP service that accepts one text command
at a time, hands it to one of its bots and returns the textual answer. The
companion client relays a locally typed command to a (possibly remote)
instance of that service.
"""

__version__ = "0.1.0"
