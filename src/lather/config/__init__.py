"""
Endpoint binding and driver settings.

Import from this package directly instead of the individual submodules.
"""

from __future__ import annotations

from .endpoint import EndpointConfig, configure, envelope_namespace_for
from .settings import get_http_driver_name, get_timeout, get_xml_driver_name

__all__ = [
    "EndpointConfig",
    "configure",
    "envelope_namespace_for",
    "get_http_driver_name",
    "get_timeout",
    "get_xml_driver_name",
]
