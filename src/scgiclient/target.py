"""
Handling of backend addresses.

An address is a URL whose scheme is ignored. Exactly one of its authority and path must
be present:

* ``scgi://HOST:PORT`` or ``scgi://HOST`` names a TCP endpoint (port 80 if omitted);
  IPv6 literals go in brackets, as in ``scgi://[::1]:4000``.
* ``scgi:///absolute/path`` names a UNIX-domain socket by absolute path.
* ``scgi:relative/path`` names a UNIX-domain socket relative to the working directory.

The path is never rewritten. An address with both a host and a path is rejected rather
than taken to mean a path relative to the host.
"""

from __future__ import annotations

import logging
import os
import urllib.parse
from typing import Self

from .errors import ConfigurationError

DEFAULT_PORT = 80
"""The TCP port used when an address names none."""


class UNIXPath:
    """The filesystem path of a UNIX-domain socket."""

    __slots__ = {
        "path": "The socket’s path, absolute or relative to the working directory.",
    }

    path: str

    def __init__(self: Self, path: str) -> None:
        """
        Construct a new UNIXPath.

        :param path: The path.
        """
        self.path = path

    @property
    def is_absolute(self: Self) -> bool:
        """Whether the path is absolute."""
        return os.path.isabs(self.path)

    def __eq__(self: Self, other: object) -> bool:
        """Compare two paths."""
        if not isinstance(other, UNIXPath):
            return NotImplemented
        return self.path == other.path

    def __hash__(self: Self) -> int:
        """Hash the path."""
        return hash(self.path)

    def __repr__(self: Self) -> str:
        """Return a representation of the path."""
        return f"UNIXPath({self.path!r})"


class TCPEndpoint:
    """A TCP host and port to connect to."""

    __slots__ = {
        "host": "The host part, which can be a hostname or address literal.",
        "port": "The port number.",
    }

    host: str
    port: int

    def __init__(self: Self, host: str, port: int = DEFAULT_PORT) -> None:
        """
        Construct a new TCPEndpoint.

        :param host: The hostname or address literal, without brackets.
        :param port: The port number.
        """
        self.host = host
        self.port = port

    def __eq__(self: Self, other: object) -> bool:
        """Compare two endpoints."""
        if not isinstance(other, TCPEndpoint):
            return NotImplemented
        return (self.host, self.port) == (other.host, other.port)

    def __hash__(self: Self) -> int:
        """Hash the endpoint."""
        return hash((self.host, self.port))

    def __repr__(self: Self) -> str:
        """Return a representation of the endpoint."""
        return f"TCPEndpoint({self.host!r}, {self.port!r})"


TargetAddress = UNIXPath | TCPEndpoint
"""The type of a resolved backend address."""


def resolve(address: str) -> TargetAddress:
    """
    Work out what kind of backend an address names.

    :param address: The address.
    :return: The UNIX-domain socket path or TCP endpoint.
    :raises ConfigurationError: if the address names both or neither.
    """
    try:
        parts = urllib.parse.urlsplit(address)
    except ValueError as exc:
        msg = f"Unparseable address {address!r}"
        raise ConfigurationError(msg, "resolve target", exc) from exc
    if parts.netloc and parts.path:
        msg = f"Address {address!r} has both a host and a path"
        raise ConfigurationError(msg, "resolve target")
    if parts.netloc:
        # urlsplit removes the brackets from an IPv6 literal in hostname.
        host = parts.hostname
        if not host:
            msg = f"Address {address!r} has an empty host"
            raise ConfigurationError(msg, "resolve target")
        try:
            port = parts.port
        except ValueError as exc:
            msg = f"Address {address!r} has an invalid port"
            raise ConfigurationError(msg, "resolve target", exc) from exc
        target: TargetAddress = TCPEndpoint(
            host, port if port is not None else DEFAULT_PORT
        )
    elif parts.path:
        target = UNIXPath(parts.path)
    else:
        msg = f"Address {address!r} has neither a host nor a path"
        raise ConfigurationError(msg, "resolve target")
    logging.getLogger(__name__).debug("Resolved %s to %r", address, target)
    return target
