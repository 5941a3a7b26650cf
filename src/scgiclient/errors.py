"""Errors raised by the SCGI client."""

from __future__ import annotations

import enum
from typing import Self


class ErrorKind(enum.Enum):
    """The category of a failure."""

    CONNECTION = "connection"
    """The connection to the backend could not be established."""

    IO = "io"
    """A read or write failed on an established connection."""

    FORMAT = "format"
    """A netstring was malformed."""

    PROTOCOL = "protocol"
    """The backend’s reply was not a valid SCGI response."""

    CONFIGURATION = "configuration"
    """The target address did not unambiguously name a backend."""


class Error(Exception):
    """
    The base class of all errors raised by scgiclient.

    Only the subclasses can be constructed, and each one fixes the error’s kind. Every
    error records which step of the round trip failed and, where the failure
    originated in another exception, that exception as its cause.
    """

    __slots__ = {
        "operation": """A short description of the step that failed.""",
        "cause": """The underlying exception, or None.""",
    }

    kind: ErrorKind
    operation: str
    cause: BaseException | None

    def __init__(
        self: Self, message: str, operation: str, cause: BaseException | None = None
    ) -> None:
        """
        Construct a new Error.

        :param message: The human-readable description of the failure.
        :param operation: The step that failed, such as "connect" or "read status".
        :param cause: The underlying exception, if any.
        """
        if type(self) is Error:
            msg = "Error is abstract; raise one of its subclasses"
            raise TypeError(msg)
        super().__init__(message)
        self.operation = operation
        self.cause = cause

    def __str__(self: Self) -> str:
        """Return the message prefixed with the failed operation."""
        text = f"{self.operation}: {super().__str__()}"
        if self.cause is not None:
            text += f" ({self.cause})"
        return text


class ConnectError(Error):
    """Raised if the backend cannot be dialled."""

    __slots__ = ()

    kind = ErrorKind.CONNECTION


class TransportError(Error):
    """Raised if reading from or writing to an established connection fails."""

    __slots__ = ()

    kind = ErrorKind.IO


class FormatError(Error):
    """Raised if a netstring is malformed."""

    __slots__ = ()

    kind = ErrorKind.FORMAT


class ProtocolError(Error):
    """
    Raised if the backend’s reply cannot be understood.

    This covers a missing or malformed Status line as well as any failure of the HTTP
    parser that handles the remainder of the reply.
    """

    __slots__ = ()

    kind = ErrorKind.PROTOCOL


class ConfigurationError(Error):
    """Raised if a target address does not resolve to exactly one kind of backend."""

    __slots__ = ()

    kind = ErrorKind.CONFIGURATION
