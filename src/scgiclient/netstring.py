"""
Netstring encoding and decoding.

A netstring is a byte string prefixed by its length in ASCII decimal and a colon and
followed by a comma, such as ``5:hello,``.
"""

from __future__ import annotations

from typing import BinaryIO

from .errors import FormatError, TransportError

MAX_LENGTH_DIGITS = 18
"""The longest length prefix accepted when decoding, short enough to fit a ssize_t."""

READ_CHUNK_SIZE = 65536
"""The most bytes asked of the stream by a single read while decoding."""


def encode(data: bytes) -> bytes:
    """
    Encode a byte string as a netstring.

    :param data: The payload.
    :return: The netstring.
    """
    return b"%d:%s," % (len(data), data)


def write(stream: BinaryIO, data: bytes) -> None:
    """
    Write a byte string to a stream as a netstring.

    :param stream: The destination.
    :param data: The payload.
    :raises TransportError: if the stream cannot be written.
    """
    try:
        stream.write(encode(data))
    except OSError as exc:
        msg = "write failed"
        raise TransportError(msg, "write netstring", exc) from exc


def _read_length(stream: BinaryIO) -> int:
    """
    Read the length prefix and its colon.

    :param stream: The source.
    :return: The payload length.
    """
    digits = bytearray()
    while True:
        try:
            ch = stream.read(1)
        except OSError as exc:
            msg = "read failed"
            raise TransportError(msg, "read netstring", exc) from exc
        if not ch:
            msg = "truncated"
            raise FormatError(msg, "read netstring")
        if ch == b":":
            break
        # Only plain ASCII digits are allowed; in particular no sign or whitespace,
        # both of which int() would otherwise accept.
        if not (b"0" <= ch <= b"9") or len(digits) == MAX_LENGTH_DIGITS:
            msg = "invalid length"
            raise FormatError(msg, "read netstring")
        digits += ch
    if not digits:
        msg = "invalid length"
        raise FormatError(msg, "read netstring")
    return int(digits)


def read(stream: BinaryIO) -> bytes:
    """
    Read one netstring from a stream.

    Nothing past the terminating comma is consumed.

    :param stream: The source, positioned at the start of the length prefix.
    :return: The payload.
    :raises FormatError: if the netstring is malformed or the stream ends early.
    :raises TransportError: if the stream cannot be read.
    """
    count = _read_length(stream)
    wanted = count + 1
    chunks = []
    while wanted:
        try:
            chunk = stream.read(min(wanted, READ_CHUNK_SIZE))
        except OSError as exc:
            msg = "read failed"
            raise TransportError(msg, "read netstring", exc) from exc
        if not chunk:
            msg = "truncated"
            raise FormatError(msg, "read netstring")
        chunks.append(chunk)
        wanted -= len(chunk)
    data = b"".join(chunks)
    if data[-1:] != b",":
        msg = "missing terminator"
        raise FormatError(msg, "read netstring")
    return data[:-1]
