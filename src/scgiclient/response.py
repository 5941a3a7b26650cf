"""
Interpretation of SCGI replies.

An SCGI reply looks like an HTTP response except that, where HTTP has a status line, an
SCGI reply has a Status header. This module reads that header, puts an ordinary status
line in its place, and leaves the rest of the work to the standard library’s HTTP
response parser.
"""

from __future__ import annotations

import http
import http.client
import io
import logging
from typing import BinaryIO, Self

from .errors import ProtocolError, TransportError
from .types import Response

MAX_STATUS_LINE = 65536
"""The longest first line accepted from a backend, including its terminator."""


class _ChainReader(io.RawIOBase):
    """A raw stream that reads a prefix and then everything from another stream."""

    __slots__ = {
        "_prefix": """The bytes still to be returned before the stream.""",
        "_stream": """The stream to read once the prefix is used up.""",
    }

    _prefix: memoryview
    _stream: BinaryIO

    def __init__(self: Self, prefix: bytes, stream: BinaryIO) -> None:
        """
        Construct a new _ChainReader.

        :param prefix: The bytes to return first.
        :param stream: The stream to continue with.
        """
        super().__init__()
        self._prefix = memoryview(prefix)
        self._stream = stream

    def readable(self: Self) -> bool:  # noqa: D102
        return True

    def readinto(self: Self, buffer: bytearray | memoryview) -> int:  # noqa: D102
        if self._prefix:
            n = min(len(buffer), len(self._prefix))
            buffer[:n] = self._prefix[:n]
            self._prefix = self._prefix[n:]
            return n
        # At most one read of the underlying stream per call. Unbuffered streams have
        # no read1, but their read already behaves that way.
        read1 = getattr(self._stream, "read1", self._stream.read)
        data = read1(len(buffer)) or b""
        buffer[: len(data)] = data
        return len(data)


class _StreamSocket:
    """
    An object that http.client.HTTPResponse accepts in place of a socket.

    HTTPResponse only ever asks its socket for a file to read from.
    """

    __slots__ = {
        "_fp": """The file to hand out.""",
    }

    _fp: BinaryIO

    def __init__(self: Self, fp: BinaryIO) -> None:
        """
        Construct a new _StreamSocket.

        :param fp: The file that makefile returns.
        """
        self._fp = fp

    def makefile(self: Self, _mode: str) -> BinaryIO:
        """Return the file."""
        return self._fp


def _read_status_line(stream: BinaryIO) -> str:
    """
    Read the first line of a reply and return the value of its Status header.

    :param stream: The reply stream.
    :return: The status code and reason phrase.
    """
    try:
        line = stream.readline(MAX_STATUS_LINE + 1)
    except OSError as exc:
        msg = "read failed"
        raise TransportError(msg, "read status", exc) from exc
    if len(line) > MAX_STATUS_LINE:
        msg = "status line too long"
        raise ProtocolError(msg, "read status")
    if not line.endswith(b"\n"):
        msg = "truncated response"
        raise ProtocolError(msg, "read status")
    line = line[:-1]
    if line.endswith(b"\r"):
        line = line[:-1]
    text = line.decode("ISO-8859-1")
    logging.getLogger(__name__).debug("Received first line %r", text)
    name, sep, value = text.partition(": ")
    if not sep:
        msg = "invalid status line"
        raise ProtocolError(msg, "read status")
    if name != "Status":
        msg = "missing Status header"
        raise ProtocolError(msg, "read status")
    return value


def _complete_status(value: str) -> str:
    """
    Add the standard reason phrase to a status value that has none.

    :param value: The value of the Status header.
    :return: The status code and reason phrase.
    """
    code = value.strip()
    if not code.isdigit():
        return value
    try:
        phrase = http.HTTPStatus(int(code)).phrase
    except ValueError:
        phrase = "Unknown Status"
    return f"{code} {phrase}"


def read_response(stream: BinaryIO, protocol: str, method: str = "GET") -> Response:
    """
    Read a complete SCGI reply.

    The first line of the reply must be a Status header. Nothing beyond the first line
    is examined before the remainder is handed to the HTTP parser.

    :param stream: The reply stream, positioned at its start.
    :param protocol: The protocol version of the request, used as the version of the
        response.
    :param method: The request method, which the HTTP parser needs to decide whether a
        body follows.
    :return: The response, with its body fully read.
    :raises ProtocolError: if the reply is malformed.
    :raises TransportError: if the stream cannot be read.
    """
    status = _complete_status(_read_status_line(stream))
    try:
        status_line = f"{protocol} {status}\r\n".encode("ISO-8859-1")
    except UnicodeEncodeError as exc:
        msg = f"protocol {protocol!r} cannot start an HTTP status line"
        raise ProtocolError(msg, "build status line", exc) from exc
    combined = io.BufferedReader(_ChainReader(status_line, stream))
    parser = http.client.HTTPResponse(
        _StreamSocket(combined),  # type: ignore[arg-type]
        method=method,
    )
    try:
        parser.begin()
        body = parser.read()
    except http.client.HTTPException as exc:
        msg = "malformed HTTP response"
        raise ProtocolError(msg, "parse response", exc) from exc
    except OSError as exc:
        msg = "read failed"
        raise TransportError(msg, "read response", exc) from exc
    finally:
        parser.close()
    return Response(protocol, parser.status, parser.reason, parser.headers, body)
