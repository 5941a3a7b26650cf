"""Tests the main module."""

from __future__ import annotations

import argparse
import http.client
import io
import json
import pathlib
import tempfile
from typing import Self
from unittest import TestCase
from unittest.mock import MagicMock, patch

from scgiclient import main
from scgiclient.errors import ConnectError
from scgiclient.types import Request, Response


def _response(body: bytes) -> Response:
    """
    Build a response with one header.

    :param body: The body.
    :return: The response.
    """
    headers = http.client.HTTPMessage()
    headers["Content-Type"] = "text/plain"
    return Response("HTTP/1.1", 200, "OK", headers, body)


class TestParseHeader(TestCase):
    """Tests parsing of header arguments."""

    def test_simple(self: Self) -> None:
        """Test a normal header."""
        self.assertEqual(main.parse_header("X-A: b c "), ("X-A", "b c"))

    def test_colon_in_value(self: Self) -> None:
        """Test that only the first colon separates key from value."""
        self.assertEqual(main.parse_header("Host:a:80"), ("Host", "a:80"))

    def test_invalid(self: Self) -> None:
        """Test arguments with no colon or no key."""
        with self.assertRaises(argparse.ArgumentTypeError):
            main.parse_header("nocolon")
        with self.assertRaises(argparse.ArgumentTypeError):
            main.parse_header(":value")


class TestLoadBody(TestCase):
    """Tests working out the request body."""

    def test_none(self: Self) -> None:
        """Test no body."""
        self.assertEqual(main.load_body(None), b"")

    def test_literal(self: Self) -> None:
        """Test a literal body."""
        self.assertEqual(main.load_body("a=1"), b"a=1")

    def test_file(self: Self) -> None:
        """Test a body read from a file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp) / "body"
            path.write_bytes(b"\x00\x01")
            self.assertEqual(main.load_body(f"@{path}"), b"\x00\x01")


class TestWriteResponse(TestCase):
    """Tests printing responses."""

    def test_body_only(self: Self) -> None:
        """Test printing just the body."""
        out = io.BytesIO()
        main.write_response(_response(b"hi"), False, out)
        self.assertEqual(out.getvalue(), b"hi")

    def test_include(self: Self) -> None:
        """Test printing the status line and headers too."""
        out = io.BytesIO()
        main.write_response(_response(b"hi"), True, out)
        self.assertEqual(
            out.getvalue(), b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nhi"
        )


class TestMain(TestCase):
    """Tests the entry point."""

    @patch("scgiclient.main.write_response")
    @patch("scgiclient.main.SocketClient")
    def test_request(
        self: Self, client_class: MagicMock, write_response: MagicMock
    ) -> None:
        """Test that arguments become a request and the response is printed."""
        response = _response(b"hi")
        client_class.return_value.round_trip.return_value = response
        main.main(
            [
                "-H",
                "X-A: 1",
                "-H",
                "X-A: 2",
                "-d",
                "payload",
                "-i",
                "scgi://localhost:9000",
            ]
        )
        (address, request), _ = client_class.return_value.round_trip.call_args
        self.assertEqual(address, "scgi://localhost:9000")
        assert isinstance(request, Request)
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.protocol, "HTTP/1.1")
        self.assertEqual(request.headers, {"X-A": ["1", "2"]})
        self.assertEqual(request.body, b"payload")
        write_response.assert_called_once()
        self.assertIs(write_response.call_args.args[0], response)
        self.assertTrue(write_response.call_args.args[1])

    @patch("scgiclient.main.write_response")
    @patch("scgiclient.main.SocketClient")
    def test_explicit_method(
        self: Self, client_class: MagicMock, _write_response: MagicMock
    ) -> None:
        """Test that -X overrides the default method."""
        client_class.return_value.round_trip.return_value = _response(b"")
        main.main(["-X", "HEAD", "--protocol", "HTTP/1.0", "scgi:app.sock"])
        (_, request), _ = client_class.return_value.round_trip.call_args
        self.assertEqual(request.method, "HEAD")
        self.assertEqual(request.protocol, "HTTP/1.0")
        self.assertEqual(request.body, b"")

    @patch("scgiclient.main.SocketClient")
    def test_failure(self: Self, client_class: MagicMock) -> None:
        """Test that a failed round trip exits with status 1."""
        client_class.return_value.round_trip.side_effect = ConnectError(
            "cannot connect", "connect", ConnectionRefusedError()
        )
        with (
            self.assertLogs("scgiclient.main", "ERROR"),
            self.assertRaises(SystemExit) as ctx,
        ):
            main.main(["scgi://localhost:9000"])
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_header(self: Self) -> None:
        """Test that a malformed header argument is a usage error."""
        with (
            patch("sys.stderr", io.StringIO()),
            self.assertRaises(SystemExit) as ctx,
        ):
            main.main(["-H", "bogus", "scgi://localhost:9000"])
        self.assertEqual(ctx.exception.code, 2)

    @patch("logging.config.dictConfig")
    @patch("scgiclient.main.write_response")
    @patch("scgiclient.main.SocketClient")
    def test_logging_config(
        self: Self,
        client_class: MagicMock,
        _write_response: MagicMock,
        dict_config: MagicMock,
    ) -> None:
        """Test that a logging configuration file is loaded."""
        client_class.return_value.round_trip.return_value = _response(b"")
        cfg = {"version": 1, "disable_existing_loggers": False}
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp) / "logging.json"
            path.write_text(json.dumps(cfg))
            main.main(["--logging", str(path), "scgi://localhost:9000"])
        dict_config.assert_called_once_with(cfg)
