"""
Endpoint binding for a SOAP service.

An ``EndpointConfig`` is built once per service (usually at import or
startup time) and handed to every ``Service`` that talks to it.  It is
frozen, so it can be shared freely between threads.
"""

from __future__ import annotations

__all__ = ["EndpointConfig", "configure", "envelope_namespace_for"]

import logging
from dataclasses import dataclass

from ..constants import REQUEST_CONTENT_TYPES, SOAP_NAMESPACES
from ..errors import ConfigError

_logger = logging.getLogger(__name__)


def envelope_namespace_for(version: object) -> str:
    """
    Look up the SOAP envelope namespace for a protocol version.

    Raises:
        ConfigError: If the version is not 1 (SOAP 1.1) or 2 (SOAP 1.2).
    """
    # bool is an int subclass; True must not pass for SOAP 1.1
    if isinstance(version, bool) or version not in SOAP_NAMESPACES:
        raise ConfigError(f"Unknown protocol version {version!r}")
    return SOAP_NAMESPACES[version]  # type: ignore[index]


@dataclass(frozen=True)
class EndpointConfig:
    """Static binding of a SOAP service: protocol version and target URI.

    Attributes:
        version: 1 for SOAP 1.1, 2 for SOAP 1.2.
        uri: Endpoint URL requests are POSTed to.
    """

    version: int
    uri: str

    def __post_init__(self) -> None:
        envelope_namespace_for(self.version)
        if not isinstance(self.uri, str) or not self.uri.strip():
            raise ConfigError("Missing endpoint uri")

    def envelope_namespace(self) -> str:
        return envelope_namespace_for(self.version)

    def request_content_type(self) -> str:
        """Content-Type for requests, without the charset parameter."""
        envelope_namespace_for(self.version)
        return REQUEST_CONTENT_TYPES[self.version]


def configure(version: int | None, uri: str | None) -> EndpointConfig:
    """
    Build the endpoint binding for a service.

    Args:
        version: SOAP protocol version (1 or 2).
        uri: Endpoint URL.

    Returns:
        A frozen EndpointConfig.

    Raises:
        ConfigError: If the version is unknown or the uri is absent.
    """
    if version is None:
        raise ConfigError("Missing option: version")
    if uri is None:
        raise ConfigError("Missing option: uri")
    endpoint = EndpointConfig(version=version, uri=uri)
    _logger.debug("Configured endpoint %s (protocol version %d)", uri, version)
    return endpoint
