"""Command-line interface for sending one request to a REST server."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from pydantic import ValidationError

from .client import RestClient
from .config import LOG_LEVELS, get_settings
from .exceptions import ResponseParseError, TransportError
from .logging_utils import configure_logging
from .models import Method

EXIT_OK = 0
EXIT_HTTP_ERROR = 1
EXIT_TRANSPORT_ERROR = 3


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {text}")
    return value


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jsonr8r", description="Send a JSON-oriented request to a REST server."
    )
    parser.add_argument(
        "method",
        type=str.upper,
        choices=[m.value for m in Method],
        help="HTTP verb to send.",
    )
    parser.add_argument("endpoint", help="Path appended to the server URL, e.g. /props/name.")
    parser.add_argument("content", nargs="?", default="", help="Body text for PUT/POST.")
    parser.add_argument("--server-url", default=None,
                        help="Override JSONR8R_SERVER_URL for this run.")
    parser.add_argument("--timeout", type=_positive_float, default=None,
                        help="Seconds to wait for the server.")
    parser.add_argument("--file", dest="content_is_file_path", action="store_true",
                        help="Treat CONTENT as the path of a file to upload.")
    parser.add_argument("--json", dest="pretty_json", action="store_true",
                        help="Pretty-print the response body when it is JSON.")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                        help="Override JSONR8R_LOG_LEVEL.")

    args = parser.parse_args(argv)
    if args.method in (Method.GET.value, Method.DELETE.value) and (
        args.content or args.content_is_file_path
    ):
        parser.error(f"{args.method} does not take CONTENT")
    if args.method in (Method.PUT.value, Method.POST.value) and args.content_is_file_path and not args.content:
        parser.error("--file requires CONTENT to name a file")
    try:
        get_settings()
    except ValidationError as exc:
        parser.error(f"invalid JSONR8R_ environment settings: {exc}")
    return args


def run_cli(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logger = configure_logging("jsonr8r", args.log_level)

    with RestClient(args.server_url, timeout=args.timeout) as client:
        try:
            response = client.request(
                args.method, args.endpoint, args.content, args.content_is_file_path
            )
        except TransportError as exc:
            logger.error("%s", exc)
            return EXIT_TRANSPORT_ERROR
        except OSError as exc:
            logger.error("Could not read upload file %s: %s", args.content, exc)
            return EXIT_TRANSPORT_ERROR

    body = response.text()
    if args.pretty_json:
        try:
            body = json.dumps(response.json(), indent=2, sort_keys=True)
        except ResponseParseError:
            logger.debug("Response body is not JSON; printing it unchanged.")

    print(response.status())
    if body:
        print(body)
    return EXIT_OK if response.ok else EXIT_HTTP_ERROR


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
