"""
lather: a small SOAP 1.1/1.2 client.

Builds SOAP envelopes, POSTs them through a pluggable HTTP driver and
classifies the answer as a document, a SOAP Fault or an HTTP error, with
hooks at every stage.
"""

from __future__ import annotations

from .config import EndpointConfig, configure
from .constants import SOAP11_NAMESPACE, SOAP12_NAMESPACE, __version__
from .core import (
    Document,
    Element,
    Response,
    Service,
    ServiceHooks,
    SoapAction,
    build_envelope,
    extract_fault,
)
from .errors import (
    ConfigError,
    Fault,
    FaultError,
    HttpError,
    LatherError,
    ProtocolError,
    TransportError,
    XmlParseError,
)
from .network import RawResponse, TransportPort, get_http_driver
from .xmlquery import BaseNode, DocumentPort, get_xml_driver

__all__ = [
    "SOAP11_NAMESPACE",
    "SOAP12_NAMESPACE",
    "BaseNode",
    "ConfigError",
    "Document",
    "DocumentPort",
    "Element",
    "EndpointConfig",
    "Fault",
    "FaultError",
    "HttpError",
    "LatherError",
    "ProtocolError",
    "RawResponse",
    "Response",
    "Service",
    "ServiceHooks",
    "SoapAction",
    "TransportError",
    "TransportPort",
    "XmlParseError",
    "__version__",
    "build_envelope",
    "configure",
    "extract_fault",
    "get_http_driver",
    "get_xml_driver",
]
