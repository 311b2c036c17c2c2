"""
Standard HTTP(S) driver built on ``urllib.request``.

Each ``send`` builds its own opener, so one driver instance can be shared
by concurrent dispatches.  The opener is what ``on_client`` receives:
callers add handlers to it (proxy, cookies, basic auth) per request.
"""

from __future__ import annotations

__all__ = ["UrllibTransport"]

import http.client
import logging
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlparse

from ..constants import BYTES_PER_MB, DEFAULT_TIMEOUT_HTTP_POST, MAX_RESPONSE_SIZE, RECV_BUFFER_SIZE
from ..errors import ConfigError, TransportError
from .protocol import RawResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

_logger = logging.getLogger(__name__)


class _Readable(Protocol):
    def read(self, amt: int = ...) -> bytes: ...


def _read_with_limit(response: _Readable, url: str) -> bytes:
    """Read an HTTP response body with size limit to prevent memory exhaustion."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = response.read(RECV_BUFFER_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > MAX_RESPONSE_SIZE:
            raise TransportError(
                f"Response from {url} exceeds {MAX_RESPONSE_SIZE // BYTES_PER_MB} MB limit"
            )
        chunks.append(chunk)
    # http.client stops at EOF without checking Content-Length; it leaves the
    # unread byte count in .length
    remaining = getattr(response, "length", None)
    if isinstance(remaining, int) and remaining > 0:
        raise TransportError(
            f"Incomplete response from {url}: connection closed with {remaining} bytes missing",
            retryable=True,
        )
    return b"".join(chunks)


def _require_http_url(url: str, *, https_only: bool) -> None:
    """Reject URLs the driver cannot or must not POST to.

    Raises:
        ConfigError: On a non-HTTP scheme, or plain http when https_only is set.
    """
    scheme = urlparse(url).scheme.lower()
    if scheme not in ("http", "https"):
        raise ConfigError(f"Unsupported URL scheme for HTTP driver: {url}")
    if https_only and scheme != "https":
        raise ConfigError(
            f"Only HTTPS URLs are allowed (got {scheme}://). "
            "Requests must not be sent over unencrypted connections."
        )


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that refuses HTTPS to HTTP downgrades."""

    def redirect_request(  # type: ignore[override]  # urllib stubs use incompatible signature
        self,
        req: urllib.request.Request,
        fp: http.client.HTTPResponse,
        code: int,
        msg: str,
        headers: http.client.HTTPMessage,
        newurl: str,
    ) -> urllib.request.Request | None:
        parsed_orig = urlparse(req.full_url)
        parsed_new = urlparse(newurl)
        if parsed_orig.scheme == "https" and parsed_new.scheme == "http":
            raise TransportError(f"Refused redirect from HTTPS to HTTP: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def _build_opener() -> urllib.request.OpenerDirector:
    """Fresh opener with safe redirect handling. Thin wrapper to simplify testing."""
    return urllib.request.build_opener(_SafeRedirectHandler)


def _content_type(headers: Any) -> str:
    if headers is None:
        return ""
    return headers.get("Content-Type", "") or ""


class UrllibTransport:
    """HTTP driver using the standard library.

    Args:
        timeout: Socket timeout in seconds.
        require_https: Refuse plain http:// endpoints.
    """

    name = "urllib"

    def __init__(
        self, timeout: int = DEFAULT_TIMEOUT_HTTP_POST, *, require_https: bool = False
    ) -> None:
        self.timeout = timeout
        self.require_https = require_https

    def send(
        self,
        uri: str,
        body: bytes,
        headers: Mapping[str, str],
        *,
        on_client: Callable[[Any], None] | None = None,
    ) -> RawResponse:
        _require_http_url(uri, https_only=self.require_https)
        opener = _build_opener()
        if on_client is not None:
            on_client(opener)

        _logger.debug("POST %s (urllib, timeout=%ds, %d bytes)", uri, self.timeout, len(body))
        req = urllib.request.Request(uri, data=body, headers=dict(headers), method="POST")  # noqa: S310 -- scheme checked by _require_http_url
        try:
            with opener.open(req, timeout=self.timeout) as response:
                data = _read_with_limit(response, uri)
                result = RawResponse(response.status, data, _content_type(response.headers))
        except urllib.error.HTTPError as exc:
            # 4xx/5xx still carry a body worth classifying (SOAP 1.1 faults use 500)
            try:
                data = _read_with_limit(exc, uri)
            except (OSError, http.client.HTTPException) as read_exc:
                raise TransportError(
                    f"Connection to {uri} failed: {read_exc!r}",
                    retryable=True,
                ) from read_exc
            finally:
                exc.close()
            result = RawResponse(exc.code, data, _content_type(exc.headers))
        except urllib.error.URLError as exc:
            raise TransportError(f"HTTP POST failed: {uri}: {exc.reason}", retryable=True) from exc
        except TimeoutError as exc:
            raise TransportError(
                f"Connection timed out after {self.timeout}s: {uri}",
                retryable=True,
            ) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(
                f"Connection to {uri} failed: {exc!r}",
                retryable=True,
            ) from exc

        _logger.debug("POST %s -> %d (%d bytes)", uri, result.status, len(result.body))
        return result
