"""Envelope building, dispatch and response classification."""

from __future__ import annotations

from .envelope import Document, Element, build_envelope, xml_escape
from .response import Response, extract_fault
from .service import (
    Service,
    ServiceHooks,
    SoapAction,
    default_on_fault,
    default_on_http_error,
    default_on_missing_document,
    pretty_format_envelope,
    resolve_soap_action,
)

__all__ = [
    "Document",
    "Element",
    "Response",
    "Service",
    "ServiceHooks",
    "SoapAction",
    "build_envelope",
    "default_on_fault",
    "default_on_http_error",
    "default_on_missing_document",
    "extract_fault",
    "pretty_format_envelope",
    "resolve_soap_action",
    "xml_escape",
]
