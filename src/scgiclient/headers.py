"""Construction of the SCGI request header block."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Self

from .types import HeaderValue, Request

RESERVED_KEYS = frozenset(
    ("CONTENT_LENGTH", "SCGI", "REQUEST_METHOD", "SERVER_PROTOCOL")
)
"""The keys that always open the header block and cannot be supplied by a request."""


def _to_bytes(value: HeaderValue) -> bytes:
    """
    Convert a key or value to bytes.

    :param value: A string, which is UTF-8-encoded, or bytes, which are used as is.
    :return: The bytes.
    """
    if isinstance(value, str):
        return value.encode("UTF-8")
    return bytes(value)


class HeaderBlock:
    """
    The header block of an SCGI request.

    The four mandatory variables are constructor parameters rather than entries among
    the other headers, which is what keeps them first and in the order SCGI requires.
    """

    __slots__ = {
        "content_length": """The length of the request body.""",
        "method": """The request method.""",
        "protocol": """The protocol version.""",
        "extra": """The remaining key/value pairs, already joined.""",
    }

    content_length: int
    method: str
    protocol: str
    extra: list[tuple[bytes, bytes]]

    def __init__(
        self: Self,
        content_length: int,
        method: str,
        protocol: str,
        extra: Iterable[tuple[HeaderValue, HeaderValue]] = (),
    ) -> None:
        """
        Construct a new HeaderBlock.

        :param content_length: The number of body bytes that will follow the block.
        :param method: The request method.
        :param protocol: The protocol version.
        :param extra: Further key/value pairs to send after the mandatory ones. No
            checking is done on their contents; a NUL byte in either one corrupts the
            block.
        """
        self.content_length = content_length
        self.method = method
        self.protocol = protocol
        self.extra = [(_to_bytes(k), _to_bytes(v)) for k, v in extra]

    @classmethod
    def from_request(cls: type[Self], request: Request, content_length: int) -> Self:
        """
        Build the header block for a request.

        Each header becomes one pair, its values joined with commas. A header named the
        same as one of the mandatory variables is left out.

        :param request: The request.
        :param content_length: The length of the request’s body.
        :return: The header block.
        """
        extra = []
        for key, values in request.headers.items():
            if key in RESERVED_KEYS:
                logging.getLogger(__name__).debug(
                    "Dropping request header %s that would override a mandatory one",
                    key,
                )
                continue
            extra.append((key, b",".join(_to_bytes(v) for v in values)))
        return cls(content_length, request.method, request.protocol, extra)

    @property
    def pairs(self: Self) -> Iterator[tuple[bytes, bytes]]:
        """The key/value pairs in the order they are sent."""
        yield b"CONTENT_LENGTH", b"%d" % self.content_length
        yield b"SCGI", b"1"
        yield b"REQUEST_METHOD", _to_bytes(self.method)
        yield b"SERVER_PROTOCOL", _to_bytes(self.protocol)
        yield from self.extra

    def encode(self: Self) -> bytes:
        """
        Serialize the block.

        :return: The NUL-delimited pairs, ready to be wrapped in a netstring.
        """
        return b"".join(k + b"\x00" + v + b"\x00" for k, v in self.pairs)

    def __bytes__(self: Self) -> bytes:
        """Serialize the block."""
        return self.encode()
