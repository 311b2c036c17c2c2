# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Legacy TLS driver using tlslite-ng.

Some older SOAP appliances only speak TLSv1.0 with RC4-MD5 -- a cipher
suite removed from OpenSSL 3.x.  This driver sends a raw HTTP/1.0 POST
over tlslite-ng's pure-Python TLS stack.
"""

from __future__ import annotations

__all__ = ["LegacyTlsTransport", "make_legacy_settings"]

import logging
import socket
import time
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from tlslite import HandshakeSettings, TLSConnection
from tlslite.errors import BaseTLSException

from ..constants import (
    BYTES_PER_MB,
    DEFAULT_TIMEOUT_LEGACY_TLS,
    MAX_RESPONSE_SIZE,
    RECV_BUFFER_SIZE,
)
from ..errors import LatherError, TransportError
from .protocol import RawResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

_logger = logging.getLogger(__name__)

# Standard HTTP(S) ports -- used to decide Host header format
_STANDARD_PORTS = (80, 443)


def make_legacy_settings() -> HandshakeSettings:
    """Build TLS 1.0 + RC4 handshake settings for legacy appliances."""
    settings = HandshakeSettings()
    settings.cipherNames = ["rc4"]
    settings.macNames = ["md5", "sha"]
    settings.minVersion = (3, 1)  # TLS 1.0
    # maxVersion left at default (3,4) -- server negotiates down to TLS 1.0
    return settings


def _parse_status_code(status_line: str) -> int:
    """Parse HTTP status code from a status line like 'HTTP/1.0 200 OK'.

    Raises:
        TransportError: If the status line cannot be parsed.
    """
    parts = status_line.split(maxsplit=2)
    if len(parts) >= 2:
        try:
            return int(parts[1])
        except ValueError:
            pass
    raise TransportError(f"Cannot parse HTTP status line: {status_line!r}")


def _parse_content_type(header_block: str) -> str:
    for line in header_block.split("\r\n")[1:]:
        name, sep, value = line.partition(":")
        if sep and name.strip().lower() == "content-type":
            return value.strip()
    return ""


def _validate_header_value(name: str, value: str) -> str:
    """Reject header values containing CR/LF to prevent HTTP header injection (CWE-113)."""
    if "\r" in value or "\n" in value:
        raise TransportError(f"HTTP header '{name}' contains invalid CR/LF characters")
    return value


class LegacyTlsTransport:
    """HTTP driver for appliances that require TLS 1.0 + RC4.

    NOTE: tlslite-ng does NOT verify the server certificate by default.
    Use this driver only for hosts that cannot be reached any other way.

    Args:
        timeout: Socket and wall-clock read timeout in seconds.
    """

    name = "legacy_tls"

    def __init__(self, timeout: int = DEFAULT_TIMEOUT_LEGACY_TLS) -> None:
        self.timeout = timeout

    def send(
        self,
        uri: str,
        body: bytes,
        headers: Mapping[str, str],
        *,
        on_client: Callable[[Any], None] | None = None,
    ) -> RawResponse:
        parsed = urlparse(uri)
        host = parsed.hostname
        port = parsed.port or 443
        path = parsed.path or "/"
        if parsed.query:
            path = f"{path}?{parsed.query}"

        if not host or parsed.scheme.lower() != "https":
            raise TransportError(f"Invalid URL for legacy TLS: {uri}")

        timeout = self.timeout
        _logger.debug("POST %s (host=%s, port=%d, timeout=%ds)", uri, host, port, timeout)

        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except TimeoutError as exc:
            raise TransportError(
                f"Connection timed out after {timeout}s. Is the server reachable?",
                retryable=True,
            ) from exc
        except OSError as exc:
            raise TransportError(
                f"Cannot connect to {host}:{port}: {exc}",
                retryable=True,
            ) from exc

        try:
            tls = TLSConnection(sock)
            # Old IIS closes TCP without sending TLS close_notify alert.
            # Without this flag, recv() raises TLSAbruptCloseError on last read.
            tls.ignoreAbruptClose = True
            if on_client is not None:
                on_client(tls)
            tls.handshakeClientCert(settings=make_legacy_settings())
            _logger.warning(
                "Using legacy TLS (TLS 1.0 + RC4) for %s:%d. "
                "This cipher suite is deprecated and only used for backward compatibility.",
                host,
                port,
            )

            response = self._send_and_receive(tls, host, port, path, body, headers)
        except LatherError:
            raise
        except TimeoutError as exc:
            raise TransportError(
                f"Connection timed out after {timeout}s. Is the server reachable?",
                retryable=True,
            ) from exc
        except (OSError, ConnectionError) as exc:
            raise TransportError(
                f"Connection to {host}:{port} failed: {exc}",
                retryable=True,
            ) from exc
        except BaseTLSException as exc:
            raise TransportError(f"TLS error with {host}:{port}: {exc}") from exc
        else:
            return response
        finally:
            sock.close()

    def _send_and_receive(
        self,
        tls: TLSConnection,
        host: str,
        port: int,
        path: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> RawResponse:
        """Build the HTTP request, send it, and parse the response.

        Raises:
            TransportError: On protocol or size-limit violations.
        """
        # HTTP/1.0 avoids chunked encoding and Expect:100-continue issues
        # with old IIS front ends.
        host_header = f"{host}:{port}" if port not in _STANDARD_PORTS else host
        all_headers: dict[str, str] = {
            "Host": host_header,
            "Connection": "close",
            "Content-Length": str(len(body)),
        }
        all_headers.update(headers)

        # Raw HTTP construction makes CRLF validation critical: unlike
        # urllib, nothing else checks the bytes we emit.
        header_lines = "".join(
            f"{k}: {_validate_header_value(k, v)}\r\n" for k, v in all_headers.items()
        )
        request_bytes = f"POST {path} HTTP/1.0\r\n{header_lines}\r\n".encode() + body

        tls.sendall(request_bytes)

        # Read full response (server closes connection after HTTP/1.0)
        raw = self._read_response(tls, host, port)

        header_end = raw.find(b"\r\n\r\n")
        if header_end == -1:
            raise TransportError(f"Invalid HTTP response from {host}:{port}")

        header_block = raw[:header_end].decode("iso-8859-1")
        response_body = raw[header_end + 4 :]
        status_line = header_block.split("\r\n", 1)[0]
        status = _parse_status_code(status_line)
        _logger.debug("POST -> %s (%d bytes)", status_line, len(response_body))

        return RawResponse(status, response_body, _parse_content_type(header_block))

    def _read_response(self, tls: TLSConnection, host: str, port: int) -> bytes:
        """Read full TLS response with size limit and wall-clock timeout."""
        chunks: list[bytes] = []
        total_size = 0
        deadline = time.monotonic() + self.timeout
        while True:
            if time.monotonic() > deadline:
                raise TransportError(
                    f"Response from {host}:{port} exceeded {self.timeout}s wall-clock timeout",
                    retryable=True,
                )
            chunk = tls.recv(RECV_BUFFER_SIZE)
            if not chunk:
                break
            total_size += len(chunk)
            if total_size > MAX_RESPONSE_SIZE:
                raise TransportError(
                    f"Response from {host}:{port} exceeds "
                    f"{MAX_RESPONSE_SIZE // BYTES_PER_MB} MB limit"
                )
            chunks.append(chunk)
        return b"".join(chunks)
