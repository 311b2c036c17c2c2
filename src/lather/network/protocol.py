"""
Transport protocol abstraction for SOAP dispatch.

Defines the interface HTTP drivers must implement. The dispatch pipeline
depends on this protocol, not on concrete implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

__all__ = ["RawResponse", "TransportPort"]


@dataclass(frozen=True)
class RawResponse:
    """What came back from one HTTP exchange.

    Attributes:
        status: HTTP status code.
        body: Response body bytes, undecoded.
        content_type: Raw Content-Type header value ("" if absent).
    """

    status: int
    body: bytes
    content_type: str = ""


class TransportPort(Protocol):
    """Protocol for HTTP drivers.

    Implementations POST a request body and hand back whatever the server
    answered.  Non-2xx statuses are part of the answer, not an error:
    SOAP 1.1 servers deliver faults with status 500.
    """

    name: str

    def send(
        self,
        uri: str,
        body: bytes,
        headers: Mapping[str, str],
        *,
        on_client: Callable[[Any], None] | None = None,
    ) -> RawResponse:
        """
        POST ``body`` to ``uri``.

        Args:
            uri: Target URL.
            body: Request body bytes.
            headers: HTTP headers to send.
            on_client: Called with the driver's client object once it is
                created and before the request is sent, so callers can
                customize it (proxies, extra handlers, TLS settings).

        Returns:
            RawResponse with status, body and content type.

        Raises:
            TransportError: If the exchange could not be completed.
        """
        ...
