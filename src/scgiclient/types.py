"""Data types used by multiple modules."""

from __future__ import annotations

import abc
import http.client
from collections.abc import Mapping, Sequence
from typing import BinaryIO, Self

HeaderValue = str | bytes
"""The legal types of a single header value."""

HeaderMap = Mapping[str, Sequence[HeaderValue]]
"""The type of a request header multimap."""


class Request:
    """An HTTP-style request to be sent to an SCGI backend."""

    __slots__ = {
        "method": """The request method, such as GET.""",
        "protocol": """The protocol version, such as HTTP/1.1.""",
        "headers": """The header multimap, in the order the headers are to be sent.""",
        "body": """The request body, as bytes or a binary file to read in full.""",
    }

    method: str
    protocol: str
    headers: HeaderMap
    body: bytes | BinaryIO

    def __init__(
        self: Self,
        method: str = "GET",
        protocol: str = "HTTP/1.1",
        headers: HeaderMap | None = None,
        body: bytes | BinaryIO = b"",
    ) -> None:
        """
        Construct a new Request.

        :param method: The request method.
        :param protocol: The protocol version; also used as the version of the
            response’s synthesized status line.
        :param headers: The headers, each key mapping to its values in order. Keys are
            sent exactly as given.
        :param body: The request body. A file is read to its end before anything is
            sent.
        """
        self.method = method
        self.protocol = protocol
        self.headers = headers if headers is not None else {}
        self.body = body

    def read_body(self: Self) -> bytes:
        """
        Return the entire request body.

        :return: The body bytes.
        """
        if isinstance(self.body, bytes | bytearray | memoryview):
            return bytes(self.body)
        return self.body.read()

    def __repr__(self: Self) -> str:
        """Return a representation of the request line."""
        return f"<Request {self.method} {self.protocol}>"


class Response:
    """An HTTP response reconstructed from an SCGI backend’s reply."""

    __slots__ = {
        "protocol": """The protocol version of the synthesized status line.""",
        "status": """The status code.""",
        "reason": """The reason phrase.""",
        "headers": """The response headers.""",
        "body": """The response body.""",
    }

    protocol: str
    status: int
    reason: str
    headers: http.client.HTTPMessage
    body: bytes

    def __init__(
        self: Self,
        protocol: str,
        status: int,
        reason: str,
        headers: http.client.HTTPMessage,
        body: bytes,
    ) -> None:
        """
        Construct a new Response.

        :param protocol: The protocol version.
        :param status: The status code.
        :param reason: The reason phrase.
        :param headers: The headers.
        :param body: The fully read body.
        """
        self.protocol = protocol
        self.status = status
        self.reason = reason
        self.headers = headers
        self.body = body

    def __repr__(self: Self) -> str:
        """Return a representation of the status line."""
        return f"<Response {self.status} {self.reason}>"


class Client(abc.ABC):
    """
    Something that can perform an SCGI round trip.

    Implementations hold no per-request state, so a single instance may be used by any
    number of threads at once.
    """

    __slots__ = ()

    @abc.abstractmethod
    def round_trip(self: Self, address: str, request: Request) -> Response:
        """
        Send a request to a backend and return its response.

        :param address: The address of the backend, such as ``scgi://host:port`` or
            ``scgi:///path/to/socket``.
        :param request: The request to send.
        :return: The response.
        :raises scgiclient.errors.Error: if the round trip fails at any step.
        """
        raise NotImplementedError
