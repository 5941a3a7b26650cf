"""A blocking SCGI client built on the standard library socket module."""

from __future__ import annotations

import contextlib
import logging
import socket
from typing import Self

from . import netstring
from .errors import ConnectError, ProtocolError, TransportError
from .headers import HeaderBlock
from .response import read_response
from .target import TargetAddress, UNIXPath, resolve
from .types import Client, Request, Response


def _connect(target: TargetAddress) -> socket.socket:
    """
    Open a stream connection to a backend.

    :param target: The backend’s address.
    :return: The connected socket.
    :raises ConnectError: if the connection cannot be made.
    """
    try:
        if isinstance(target, UNIXPath):
            with contextlib.ExitStack() as stack:
                sock = stack.enter_context(
                    socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
                )
                sock.connect(target.path)
                stack.pop_all()
            return sock
        return socket.create_connection((target.host, target.port))
    except OSError as exc:
        msg = f"cannot connect to {target!r}"
        raise ConnectError(msg, "connect", exc) from exc


class SocketClient(Client):
    """
    A client that performs each round trip over its own blocking socket.

    The socket is closed when the round trip finishes, whether or not it succeeded.
    """

    __slots__ = ()

    def round_trip(  # noqa: D102
        self: Self, address: str, request: Request
    ) -> Response:
        try:
            body = request.read_body()
        except OSError as exc:
            msg = "cannot read request body"
            raise TransportError(msg, "read body", exc) from exc
        try:
            # The protocol also starts the response’s status line.
            request.protocol.encode("ISO-8859-1")
        except UnicodeEncodeError as exc:
            msg = f"protocol {request.protocol!r} is not ISO-8859-1"
            raise ProtocolError(msg, "check protocol", exc) from exc
        target = resolve(address)
        block = HeaderBlock.from_request(request, len(body))
        with contextlib.closing(_connect(target)) as sock:
            logging.getLogger(__name__).debug("Connected to %r", target)
            try:
                with sock.makefile("wb") as writer:
                    netstring.write(writer, block.encode())
                    writer.write(body)
                    writer.flush()
            except OSError as exc:
                msg = "write failed"
                raise TransportError(msg, "send request", exc) from exc
            logging.getLogger(__name__).debug(
                "Sent %s request with %d body bytes", request.method, len(body)
            )
            with sock.makefile("rb") as reader:
                response = read_response(reader, request.protocol, request.method)
        logging.getLogger(__name__).debug(
            "Received %d %s from %r", response.status, response.reason, target
        )
        return response


_default_client = SocketClient()


def round_trip(address: str, request: Request) -> Response:
    """
    Send a request to a backend using a shared SocketClient.

    :param address: The address of the backend.
    :param request: The request to send.
    :return: The response.
    :raises scgiclient.errors.Error: if the round trip fails at any step.
    """
    return _default_client.round_trip(address, request)
