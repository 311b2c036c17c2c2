"""HTTP transport drivers for SOAP dispatch."""

from __future__ import annotations

from typing import Any

from ..config.settings import get_http_driver_name, get_timeout
from ..errors import ConfigError
from .legacy_tls import LegacyTlsTransport
from .protocol import RawResponse, TransportPort
from .transport import UrllibTransport

__all__ = [
    "HTTP_DRIVERS",
    "LegacyTlsTransport",
    "RawResponse",
    "TransportPort",
    "UrllibTransport",
    "get_http_driver",
]

HTTP_DRIVERS: dict[str, type] = {
    UrllibTransport.name: UrllibTransport,
    LegacyTlsTransport.name: LegacyTlsTransport,
}


def get_http_driver(name: str | None = None, **options: Any) -> TransportPort:
    """
    Instantiate an HTTP driver by name.

    Args:
        name: "urllib" or "legacy_tls".  Defaults to the LATHER_HTTP_DRIVER
            environment setting.
        **options: Driver constructor arguments.  ``timeout`` defaults to
            the LATHER_TIMEOUT environment setting.

    Raises:
        ConfigError: If the driver name is unknown.
    """
    name = name or get_http_driver_name()
    driver_cls = HTTP_DRIVERS.get(name)
    if driver_cls is None:
        raise ConfigError(
            f"Unknown HTTP driver {name!r} (expected one of {', '.join(sorted(HTTP_DRIVERS))})"
        )
    options.setdefault("timeout", get_timeout())
    return driver_cls(**options)
