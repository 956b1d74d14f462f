"""Command-line interface for mailcatcher-inbox.

Inspect or clear the emails held by a running MailCatcher server.
"""

from __future__ import annotations

import argparse
import logging
import sys

import structlog
from pydantic import ValidationError

from mailcatcher_inbox import __version__
from mailcatcher_inbox.client import InboxClient
from mailcatcher_inbox.config import Settings, get_settings
from mailcatcher_inbox.exceptions import ConfigurationError
from mailcatcher_inbox.result import Result

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailcatcher-inbox",
        description="Inspect emails captured by MailCatcher",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="MailCatcher base URL without port (default: settings url)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="MailCatcher HTTP port (default: settings port)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("clear", help="Delete all captured emails")

    list_parser = subparsers.add_parser("list", help="List captured emails, newest first")
    list_parser.add_argument(
        "--to",
        default=None,
        help="Only list emails received by this address",
    )

    show_parser = subparsers.add_parser("show", help="Print the headers and body of an email")
    show_parser.add_argument(
        "--to",
        default=None,
        help="Only consider emails received by this address",
    )
    show_parser.add_argument(
        "--index",
        type=int,
        default=0,
        help="Position in the inbox, 0 being the newest (default: 0)",
    )

    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides = {}
    if args.url is not None:
        overrides["url"] = args.url
    if args.port is not None:
        overrides["port"] = args.port
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def _report(result: Result) -> int:
    if result.ok:
        return 0
    print(f"error: {result.message}", file=sys.stderr)
    return 1


def _load_inbox(client: InboxClient, address: str | None) -> Result:
    result = client.fetch_emails()
    if result.ok and address is not None:
        result = client.access_inbox_for(address)
    return result


def _cmd_clear(client: InboxClient, args: argparse.Namespace) -> int:
    result = client.delete_all_emails()
    if result.ok:
        print("Deleted all emails")
    return _report(result)


def _cmd_list(client: InboxClient, args: argparse.Namespace) -> int:
    result = _load_inbox(client, args.to)
    if not result.ok:
        return _report(result)

    for header in client.get_current_inbox():
        print(f"{header.id}\t{header.created_at}\t{' '.join(header.recipients)}")
    return 0


def _cmd_show(client: InboxClient, args: argparse.Namespace) -> int:
    result = _load_inbox(client, args.to)
    if not result.ok:
        return _report(result)

    inbox = client.get_current_inbox()
    if not 0 <= args.index < len(inbox):
        print(f"error: no email at index {args.index}", file=sys.stderr)
        return 1

    opened = client.get_full_email(inbox[args.index].id)
    if not opened.ok:
        return _report(opened)

    email = opened.unwrap()
    body = client.get_email_body(email)
    if not body.ok:
        return _report(body)

    print(f"From: {client.get_email_sender(email)}")
    print(f"To: {client.get_email_to(email)}")
    cc = client.get_email_cc(email)
    if cc:
        print(f"Cc: {cc}")
    print(f"Subject: {client.get_email_subject(email)}")
    priority = client.get_email_priority(email)
    if priority:
        print(f"X-Priority: {priority}")
    print()
    print(body.unwrap())
    return 0


_COMMANDS = {
    "clear": _cmd_clear,
    "list": _cmd_list,
    "show": _cmd_show,
}


def main(args: list[str] | None = None) -> int:
    """Main entry point for the mailcatcher-inbox CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        settings = _resolve_settings(parsed)
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    # Configure logging
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )

    logger.info("mailcatcher_inbox_started", version=__version__, command=parsed.command)

    command = _COMMANDS.get(parsed.command)
    if command is None:
        logger.error("unknown_command", command=parsed.command)
        return 2

    try:
        client = InboxClient(settings)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    with client:
        return command(client, parsed)


if __name__ == "__main__":
    sys.exit(main())
