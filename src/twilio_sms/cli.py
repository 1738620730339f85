from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from .client import Client, NumberSearch
from .config import get_settings
from .errors import TwilioSmsError
from .models import Sms


def build_client() -> Client:
    """Client from TWILIO_* environment variables (and .env, if present)."""
    return Client.from_settings(get_settings())


def _format_sms(sms: Sms) -> str:
    sent = sms.date_sent or "-"
    return f"{sent} | {sms.from_ or '?'} -> {sms.to or '?'} | {sms.body or ''}"


def cmd_send(client: Client, args: argparse.Namespace) -> None:
    if args.from_number:
        sms = client.send_with_number(args.from_number, args.to, args.body)
    else:
        sms = client.send(args.to, args.body)
    print(f"Sent {sms.sid or '(no sid)'} status={sms.status or '-'}")


def cmd_thread(client: Client, args: argparse.Namespace) -> None:
    messages = client.get_thread(args.number_a, args.number_b)
    if not messages:
        print("No messages.")
        return
    for sms in messages:
        print(_format_sms(sms))


def cmd_acquire_number(client: Client, args: argparse.Namespace) -> None:
    base = client.number_search
    search = NumberSearch(
        country=args.country or base.country,
        number_type=args.type or base.number_type,
        in_region=args.region if args.region is not None else base.in_region,
        sms_enabled=base.sms_enabled,
        area_code=args.area_code,
    )
    number = client.acquire_number(search)
    print(f"Purchased {number}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twilio-sms",
        description="Send SMS, read threads and buy numbers with the configured Twilio account.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP calls to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="Send a text message.")
    send.add_argument("to")
    send.add_argument("body")
    send.add_argument(
        "--from",
        dest="from_number",
        default="",
        help="Sender number (default: TWILIO_FROM_NUMBER).",
    )
    send.set_defaults(func=cmd_send)

    thread = sub.add_parser("thread", help="Show the conversation between two numbers.")
    thread.add_argument("number_a")
    thread.add_argument("number_b")
    thread.set_defaults(func=cmd_thread)

    acquire = sub.add_parser("acquire-number", help="Buy the first available number.")
    acquire.add_argument("--country", default="")
    acquire.add_argument("--type", default="", help="Local, Mobile or TollFree.")
    acquire.add_argument("--region", default=None, help="InRegion filter, e.g. TX.")
    acquire.add_argument("--area-code", default=None)
    acquire.set_defaults(func=cmd_acquire_number)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    try:
        with build_client() as client:
            args.func(client, args)
    except TwilioSmsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
