"""The command-line entry point."""

import argparse
import json
import logging
import logging.config
import pathlib
import sys
from collections.abc import Sequence
from typing import BinaryIO

from .client import SocketClient
from .errors import Error
from .types import Request, Response


def parse_header(arg: str) -> tuple[str, str]:
    """
    Parse a ``KEY:VALUE`` header argument.

    :param arg: The argument.
    :return: The key and the value with surrounding whitespace removed.
    """
    key, sep, value = arg.partition(":")
    if not sep or not key:
        msg = f"Header {arg!r} is not of the form KEY:VALUE"
        raise argparse.ArgumentTypeError(msg)
    return key, value.strip()


def load_body(arg: str | None) -> bytes:
    """
    Work out the request body from the ``--data`` argument.

    :param arg: The argument, which is either the body itself, ``@`` followed by the
        name of a file containing the body, ``@-`` for standard input, or None.
    :return: The body.
    """
    if arg is None:
        return b""
    if arg == "@-":
        return sys.stdin.buffer.read()
    if arg.startswith("@"):
        return pathlib.Path(arg[1:]).read_bytes()
    return arg.encode("UTF-8")


def write_response(response: Response, include: bool, out: BinaryIO) -> None:
    """
    Print a response.

    :param response: The response.
    :param include: True to print the status line and headers before the body.
    :param out: The stream to print to.
    """
    if include:
        lines = [f"{response.protocol} {response.status} {response.reason}"]
        lines.extend(f"{k}: {v}" for k, v in response.headers.items())
        out.write(("\r\n".join(lines) + "\r\n\r\n").encode("ISO-8859-1"))
    out.write(response.body)
    out.flush()


def main(argv: Sequence[str] | None = None) -> None:
    """Run the application."""
    try:
        # Parse and check command-line parameters.
        parser = argparse.ArgumentParser(
            description="Send one request to an SCGI backend and print the response."
        )
        parser.add_argument(
            "--method",
            "-X",
            help="the request method (default: GET, or POST if --data is given)",
        )
        parser.add_argument(
            "--protocol",
            default="HTTP/1.1",
            help="the protocol version to send and to parse the reply as "
            "(default: HTTP/1.1)",
        )
        parser.add_argument(
            "--header",
            "-H",
            action="append",
            default=[],
            type=parse_header,
            help="a header to send; repeat a key to send several values",
            metavar="KEY:VALUE",
        )
        parser.add_argument(
            "--data",
            "-d",
            help="the request body, or @FILE to read it from a file (@- for stdin)",
        )
        parser.add_argument(
            "--include",
            "-i",
            action="store_true",
            help="print the status line and headers before the body",
        )
        parser.add_argument(
            "--logging",
            "-l",
            type=pathlib.Path,
            help="the JSON file containing a logging configuration dictionary per "
            "logging.config.dictConfig (default: none)",
        )
        parser.add_argument(
            "address",
            help="the backend address",
            metavar="scgi://HOST[:PORT] | scgi:///ABSOLUTE/PATH | scgi:RELATIVE/PATH",
        )
        args = parser.parse_args(argv)

        # Set up logging.
        if args.logging is not None:
            with args.logging.open("rb") as logging_config_file:
                cfg = json.load(logging_config_file)
            logging.config.dictConfig(cfg)
        else:
            logging.basicConfig(level=logging.WARNING)

        # Build the request.
        headers: dict[str, list[str]] = {}
        for key, value in args.header:
            headers.setdefault(key, []).append(value)
        try:
            body = load_body(args.data)
        except OSError as exc:
            parser.error(f"Cannot read request body: {exc}")
        method = args.method or ("POST" if args.data is not None else "GET")
        request = Request(method, args.protocol, headers, body)

        # Run the request.
        try:
            response = SocketClient().round_trip(args.address, request)
        except Error:
            logging.getLogger(__name__).exception("Request to %s failed", args.address)
            sys.exit(1)
        write_response(response, args.include, sys.stdout.buffer)
    finally:
        logging.shutdown()
