"""
Package-wide constants for Lather.

SOAP namespaces, timeouts, size limits and environment variable names
are centralized here.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("lather")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "BYTES_PER_MB",
    "CONTENT_TYPE_SOAP11",
    "CONTENT_TYPE_SOAP12",
    "DEFAULT_HTTP_DRIVER",
    "DEFAULT_TIMEOUT_HTTP_POST",
    "DEFAULT_TIMEOUT_LEGACY_TLS",
    "DEFAULT_XML_DRIVER",
    "ENV_HTTP_DRIVER",
    "ENV_TIMEOUT",
    "ENV_XML_DRIVER",
    "MAX_RESPONSE_SIZE",
    "MAX_TIMEOUT",
    "MIN_TIMEOUT",
    "RECV_BUFFER_SIZE",
    "REQUEST_CONTENT_TYPES",
    "SOAP_NAMESPACES",
    "SOAP11_NAMESPACE",
    "SOAP12_NAMESPACE",
    "XML_PREVIEW_LENGTH",
    "__version__",
]

# ── SOAP protocol versions ────────────────────────────────────────────

SOAP11_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP12_NAMESPACE = "http://www.w3.org/2003/05/soap-envelope"

CONTENT_TYPE_SOAP11 = "text/xml"
CONTENT_TYPE_SOAP12 = "application/soap+xml"

# Protocol version -> envelope namespace
SOAP_NAMESPACES: dict[int, str] = {1: SOAP11_NAMESPACE, 2: SOAP12_NAMESPACE}

# Protocol version -> request Content-Type (charset is appended at dispatch)
REQUEST_CONTENT_TYPES: dict[int, str] = {1: CONTENT_TYPE_SOAP11, 2: CONTENT_TYPE_SOAP12}


# ── Timeout values (seconds) ──────────────────────────────────────────

# HTTP POST request timeout
DEFAULT_TIMEOUT_HTTP_POST = 120

# Legacy TLS connection timeout
DEFAULT_TIMEOUT_LEGACY_TLS = 30

MIN_TIMEOUT = 1
MAX_TIMEOUT = 3600


# ── Size limits (bytes) ───────────────────────────────────────────────

BYTES_PER_MB = 1024 * 1024

# Maximum response body size accepted from any driver (50 MB)
MAX_RESPONSE_SIZE = 50 * 1024 * 1024

# Read/recv chunk size
RECV_BUFFER_SIZE = 8192

# Truncation length for response bodies quoted in log messages (characters)
XML_PREVIEW_LENGTH = 300


# ── Drivers ───────────────────────────────────────────────────────────

DEFAULT_HTTP_DRIVER = "urllib"
DEFAULT_XML_DRIVER = "etree"


# ── Environment variable names ──────────────────────────────────────

ENV_HTTP_DRIVER = "LATHER_HTTP_DRIVER"
ENV_XML_DRIVER = "LATHER_XML_DRIVER"
ENV_TIMEOUT = "LATHER_TIMEOUT"
