"""Command-line interface for cmdlink.

Provides the main entry point for hosting the command service or relaying
a single command to a running one.
"""

from __future__ import annotations

import argparse
import logging
import ssl
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="cmdlink",
        description="Remote command channel for a bot host process",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/cmdlink.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Host the command service until interrupted")
    serve_parser.add_argument(
        "--bot", action="append", dest="bots", default=None,
        help="Name of a built-in bot to register (repeatable, default: 'local')",
    )

    send_parser = subparsers.add_parser("send", help="Send one command to a command service")
    send_parser.add_argument(
        "text", nargs="+",
        help="Command text without the '!' prefix, e.g. 'status'",
    )

    subparsers.add_parser("status", help="Print the status snapshot of a command service")

    return parser.parse_args(argv)


def _client_verify(settings) -> bool | ssl.SSLContext:
    if settings.client.ca_file:
        return ssl.create_default_context(cafile=settings.client.ca_file)
    return True


def _serve(settings, args) -> int:
    """Start the command service and block until Ctrl+C."""
    from cmdlink.processor import BotRegistry, LocalBot
    from cmdlink.service.server import CommandService

    registry = BotRegistry([LocalBot(name) for name in args.bots or ["local"]])
    service = CommandService(settings.service, registry)

    service.start()
    if not service.is_running:
        return 1

    try:
        service.wait()
    except KeyboardInterrupt:
        print()
    finally:
        service.stop()
    return 0


def _send(settings, args) -> int:
    from cmdlink.client import CommandClient
    from cmdlink.endpoint import EndpointResolver

    with CommandClient(
        resolver=EndpointResolver(settings.service),
        timeout=settings.client.send_timeout,
        verify=_client_verify(settings),
    ) as client:
        output = client.send(" ".join(args.text))

    if output is None:
        return 1
    print(output)
    return 0


def _status(settings) -> int:
    from cmdlink.client import CommandClient
    from cmdlink.endpoint import EndpointResolver

    with CommandClient(
        resolver=EndpointResolver(settings.service),
        timeout=settings.client.send_timeout,
        verify=_client_verify(settings),
    ) as client:
        status = client.get_status()

    if status is None:
        return 1
    print(status)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the cmdlink CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from cmdlink.config.settings import load_settings
    from cmdlink.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Hosting command service")
        sys.exit(_serve(settings, args))

    elif args.command == "send":
        sys.exit(_send(settings, args))

    elif args.command == "status":
        sys.exit(_status(settings))


if __name__ == "__main__":
    main()
