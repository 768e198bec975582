"""
DM CLI - Command-line interface.

This layer provides the user-facing commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- Credentials from the environment or a .env file
- TTY detection for human vs machine output
"""

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from dm_cli.core.client import CLIError
from dm_cli.core.types import DirectMessageEnvelope, DirectMessageEvent
from dm_cli.sdk import TwitterClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def event_to_dict(event: DirectMessageEvent) -> dict[str, Any]:
    """Flatten an event for output."""
    message = event.message
    return {
        "id": event.id,
        "created_timestamp": event.created_timestamp,
        "type": event.type,
        "recipient_id": message.recipient_id if message else None,
        "sender_id": message.sender_id if message else None,
        "text": message.text if message else None,
    }


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_user(client: TwitterClient, args: argparse.Namespace) -> None:
    """Resolve a handle to a user."""
    user = client.users.resolve(args.handle.lstrip("@"))
    json_output({"id": user.id, "name": user.name, "username": user.username})


def cmd_list(client: TwitterClient, args: argparse.Namespace) -> None:
    """List the first page of direct messages."""
    page = client.messages.list()

    if is_tty():
        if not page.events:
            print("No messages found.")
            return

        rows = [event_to_dict(e) for e in page.events]
        table_output(
            ["ID", "Sender", "Recipient", "Text"],
            [[r["id"] or "", r["sender_id"] or "", r["recipient_id"] or "", r["text"] or ""] for r in rows],
            [20, 20, 20, 50],
        )
        if page.has_more:
            print(f"\nMore messages available (cursor: {page.next_cursor})")
    else:
        json_output(
            {
                "data": [event_to_dict(e) for e in page.events],
                "next_cursor": page.next_cursor,
            }
        )


def cmd_show(client: TwitterClient, args: argparse.Namespace) -> None:
    """Show a single direct message."""
    envelope = client.messages.show(args.msg_id)
    json_output(event_to_dict(envelope.event))


def cmd_send(client: TwitterClient, args: argparse.Namespace) -> None:
    """Send a direct message to a user ID or handle."""
    recipient_id = args.recipient
    if args.handle:
        recipient_id = client.users.resolve(recipient_id.lstrip("@")).id

    sent = client.messages.send(DirectMessageEnvelope.sendable(recipient_id, args.text))
    json_output(event_to_dict(sent.event))


def cmd_ratelimit(client: TwitterClient, args: argparse.Namespace) -> None:
    """Print the raw rate limit status."""
    content = client.rate_limit_status(raise_errors=args.strict)
    if content is None:
        json_output({"error": "Rate limit status unavailable"})
        sys.exit(1)
    sys.stdout.write(content.decode("utf-8", errors="replace"))
    sys.stdout.write("\n")


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dm",
        description="DM CLI - Command-line interface for Twitter direct messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials:
  TWITTER_CONSUMER_KEY, TWITTER_CONSUMER_SECRET,
  TWITTER_ACCESS_TOKEN, TWITTER_ACCESS_SECRET (env or .env file)

Examples:
  dm user jack
  dm send --handle jack "hello"
  dm list | jq '.data[].text'
""",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    user = subparsers.add_parser("user", help="Resolve a handle to a user ID")
    user.add_argument("handle", help="User handle, with or without @")
    user.set_defaults(func=cmd_user)

    list_cmd = subparsers.add_parser("list", help="List direct messages (first page)")
    list_cmd.set_defaults(func=cmd_list)

    show = subparsers.add_parser("show", help="Show a direct message")
    show.add_argument("msg_id", help="Message event ID")
    show.set_defaults(func=cmd_show)

    send = subparsers.add_parser("send", help="Send a direct message")
    send.add_argument("recipient", help="Recipient user ID (or handle with --handle)")
    send.add_argument("text", help="Message text")
    send.add_argument("--handle", action="store_true", help="Treat recipient as a handle and resolve it first")
    send.set_defaults(func=cmd_send)

    ratelimit = subparsers.add_parser("ratelimit", help="Show raw direct message rate limit status")
    ratelimit.add_argument("--strict", action="store_true", help="Report failures instead of printing nothing")
    ratelimit.set_defaults(func=cmd_ratelimit)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    load_dotenv()

    try:
        client = TwitterClient()
        args.func(client, args)
    except CLIError as e:
        error_output(e)


if __name__ == "__main__":
    main()
