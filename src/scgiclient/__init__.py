"""
An HTTP-style client that speaks SCGI.

scgiclient sends a request to an SCGI backend, such as an application server listening
on a UNIX-domain socket or a TCP port, and turns the backend’s reply into an ordinary
HTTP response.

The protocol handling is split into pure pieces that do no I/O of their own (the
netstring codec, the header block, and address resolution), the reply adapter which
reads from any binary stream, and a client which ties them together over a blocking
socket.

Please see the individual modules for more details.
"""

from .client import SocketClient, round_trip
from .errors import (
    ConfigurationError,
    ConnectError,
    Error,
    ErrorKind,
    FormatError,
    ProtocolError,
    TransportError,
)
from .types import Client, Request, Response

__all__ = [
    "Client",
    "ConfigurationError",
    "ConnectError",
    "Error",
    "ErrorKind",
    "FormatError",
    "ProtocolError",
    "Request",
    "Response",
    "SocketClient",
    "TransportError",
    "round_trip",
]
