"""Lather error types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .xmlquery.base import BaseNode

__all__ = [
    "ConfigError",
    "Fault",
    "FaultError",
    "HttpError",
    "LatherError",
    "ProtocolError",
    "TransportError",
    "XmlParseError",
]


class LatherError(Exception):
    """Base error for Lather operations."""


class ConfigError(LatherError):
    """Endpoint or driver misconfiguration."""


class XmlParseError(LatherError):
    """An XML query driver could not parse its input."""


class TransportError(LatherError):
    """The HTTP exchange could not be completed.

    Args:
        message: Human-readable error description.
        retryable: Whether this error is transient and worth retrying.
            True for timeouts and connection failures;
            False for TLS configuration issues (cipher mismatch, etc.).
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable

    def __reduce__(self) -> tuple[type[TransportError], tuple[str], dict[str, bool]]:
        """Preserve retryable flag across pickle/unpickle."""
        return (type(self), (str(self),), {"retryable": self.retryable})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.retryable = state.get("retryable", False)


class ProtocolError(LatherError):
    """The HTTP body is not a SOAP envelope."""

    def __init__(self, message: str, *, body: bytes = b"") -> None:
        super().__init__(message)
        self.body = body

    def __reduce__(self) -> tuple[type[ProtocolError], tuple[str], dict[str, bytes]]:
        return (type(self), (str(self),), {"body": self.body})

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        if state is None:
            return
        self.body = state.get("body", b"")


class HttpError(LatherError):
    """The server answered with a status of 300 or above."""

    def __init__(self, status: int, body: bytes = b"") -> None:
        super().__init__(f"HTTP error {status}")
        self.status = status
        self.body = body

    def __reduce__(self) -> tuple[type[HttpError], tuple[int, bytes]]:
        return (type(self), (self.status, self.body))


class Fault(LatherError):
    """A SOAP Fault returned by the server.

    Raised as-is by the default fault hook, so callers can inspect
    ``code``, ``reason`` and ``details`` directly.  The fields are
    read-only once constructed.
    """

    def __init__(self, code: str, reason: str, details: tuple[BaseNode, ...] = ()) -> None:
        super().__init__(code, reason)
        self._code = code
        self._reason = reason
        self._details = tuple(details)

    @property
    def code(self) -> str:
        return self._code

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def details(self) -> tuple[BaseNode, ...]:
        return self._details

    def __str__(self) -> str:
        return f"SOAP Fault {{code: {self._code!r}, reason: {self._reason!r}}}"

    def __reduce__(self) -> tuple[type[Fault], tuple[str, str]]:
        # Detail nodes belong to a parsed document and do not pickle.
        return (type(self), (self._code, self._reason))


FaultError = Fault
