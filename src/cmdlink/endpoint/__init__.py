"""Service endpoint addressing for cmdlink.

Builds the address the command service listens on and the client
connects to, asking the operator for a host when none is configured.
"""

from cmdlink.endpoint.resolver import ConfigurationIncomplete, Endpoint, EndpointResolver

__all__ = ["ConfigurationIncomplete", "Endpoint", "EndpointResolver"]
