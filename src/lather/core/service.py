"""
SOAP request/response dispatch.

A ``Service`` ties an endpoint to an HTTP driver, an XML driver and a set
of hooks.  ``invoke`` builds the request envelope, POSTs it, and sorts the
answer into one of four outcomes, each handed to its hook:

1. SOAP Fault in the body      -> ``on_fault`` (default: raise the Fault)
2. HTTP status >= 300          -> ``on_http_error`` (default: raise HttpError)
3. body is not XML             -> ``on_missing_document`` (default: raise ProtocolError)
4. otherwise                   -> ``on_response_document``, return the Response

The order is fixed: some servers send faults with a 2xx status and others
with 500, so the fault check must come before the status check.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..constants import XML_PREVIEW_LENGTH
from ..errors import HttpError, LatherError, ProtocolError, XmlParseError
from ..network import get_http_driver
from ..xmlquery import get_xml_driver
from .envelope import build_envelope
from .response import Response

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ..config.endpoint import EndpointConfig
    from ..errors import Fault
    from ..network.protocol import TransportPort
    from ..xmlquery.base import BaseNode, DocumentPort
    from .envelope import Document, Element

__all__ = [
    "Service",
    "ServiceHooks",
    "SoapAction",
    "default_on_fault",
    "default_on_http_error",
    "default_on_missing_document",
    "pretty_format_envelope",
    "resolve_soap_action",
]

_logger = logging.getLogger(__name__)

_ENVELOPE_PATTERN = re.compile(r"^<.*:Envelope", re.MULTILINE)


class SoapAction(enum.Enum):
    """How to derive the SOAPAction header from the action name."""

    AUTO = "auto"
    NONE = "none"


def resolve_soap_action(action: str, soap_action: str | SoapAction | None) -> str | None:
    """
    Work out the SOAPAction header value for a call.

    ``SoapAction.AUTO`` strips everything up to the last colon of the
    action name (``ns:DoWork`` -> ``DoWork``); ``SoapAction.NONE`` and
    ``None`` mean no header; a string is used as given.
    """
    if soap_action is SoapAction.AUTO:
        return re.sub(r"^.+:", "", action)
    if soap_action is SoapAction.NONE or soap_action is None:
        return None
    return soap_action


# ── Default hooks ────────────────────────────────────────────────────


def default_on_http_error(status: int, body: bytes) -> Any:
    raise HttpError(status, body)


def default_on_fault(fault: Fault) -> Any:
    raise fault


def default_on_missing_document(response: Response) -> Any:
    raise ProtocolError("The response is not a valid SOAP envelope", body=response.body)


@dataclass(frozen=True)
class ServiceHooks:
    """Optional callbacks for each dispatch stage.

    Fields left as ``None`` use the default behaviour: the notification
    hooks do nothing, the three error hooks raise.  A terminal hook's
    return value becomes the return value of ``invoke``, which is how a
    caller recovers from an error locally.

    Attributes:
        on_create_document: Called with the request Document after the
            action element is added (common headers, authentication).
        on_before_dispatch: Called with the Document right before it is
            sent (logging, metrics).
        on_after_create_http_client: Called with the HTTP driver's client
            object before the request goes out.
        on_response_document: Called with the parsed response document on
            success (e.g. to register namespaces for later queries).
        on_http_error: Called with (status, body) for status >= 300.
        on_fault: Called with the Fault found in the response.
        on_missing_document: Called with the Response when the body is
            not XML.
    """

    on_create_document: Callable[[Document], None] | None = None
    on_before_dispatch: Callable[[Document], None] | None = None
    on_after_create_http_client: Callable[[Any], None] | None = None
    on_response_document: Callable[[BaseNode], None] | None = None
    on_http_error: Callable[[int, bytes], Any] | None = None
    on_fault: Callable[[Fault], Any] | None = None
    on_missing_document: Callable[[Response], Any] | None = None


def pretty_format_envelope(text: str, xml_driver: DocumentPort) -> str:
    """Indent text that looks like a SOAP envelope; return anything else as-is."""
    if not _ENVELOPE_PATTERN.search(text):
        return text
    try:
        return xml_driver.parse(text).to_text(pretty=True)
    except XmlParseError as e:
        return f"Formatting failed: {e}"


class Service:
    """Client for one SOAP endpoint.

    Holds no per-call state, so one instance can serve concurrent calls.

    Args:
        endpoint: Protocol version and URI of the service.
        hooks: Stage callbacks; defaults to ``ServiceHooks()``.
        transport: HTTP driver; defaults to ``get_http_driver()``.
        xml_driver: XML query driver; defaults to ``get_xml_driver()``.
        method_map: Method name -> action name table used by ``call``.
    """

    def __init__(
        self,
        endpoint: EndpointConfig,
        *,
        hooks: ServiceHooks | None = None,
        transport: TransportPort | None = None,
        xml_driver: DocumentPort | None = None,
        method_map: Mapping[str, str] | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.hooks = hooks or ServiceHooks()
        self.transport = transport or get_http_driver()
        self.xml_driver = xml_driver or get_xml_driver()
        self.method_map: Mapping[str, str] = MappingProxyType(dict(method_map or {}))

    def make_envelope(self, fill_body: Callable[[Element], None] | None = None) -> Document:
        """Create an empty envelope for this service's SOAP version."""
        return build_envelope(self.endpoint.envelope_namespace(), fill_body)

    def invoke(
        self,
        action: str | None,
        soap_action: str | SoapAction | None = SoapAction.AUTO,
        fill: Callable[[Element], None] | None = None,
    ) -> Any:
        """
        Call ``action`` on the service.

        Args:
            action: Qualified name of the Body's root element.  A falsy
                action skips the call entirely and returns None.
            soap_action: SOAPAction header: a string, ``SoapAction.AUTO``
                (derive from the action name) or ``SoapAction.NONE``/None
                (no header).
            fill: Called with the action element to add request content.

        Returns:
            The Response on success, the return value of a terminal hook
            otherwise, or None when the call was skipped.

        Raises:
            Fault, HttpError, ProtocolError: From the default hooks.
            TransportError: If the HTTP exchange failed.
        """
        if not action:
            _logger.debug("No action given, skipping dispatch")
            return None

        header_value = resolve_soap_action(action, soap_action)
        doc = self.make_envelope(lambda body: body.add(action))
        if self.hooks.on_create_document is not None:
            self.hooks.on_create_document(doc)
        if fill is not None:
            element = doc.find(action)
            if element is None:
                raise LatherError(f"Action element {action!r} was removed from the envelope")
            fill(element)
        return self.dispatch(doc, header_value)

    def call(
        self,
        method: str,
        soap_action: str | SoapAction | None = SoapAction.AUTO,
        fill: Callable[[Element], None] | None = None,
    ) -> Any:
        """Invoke the action registered for ``method`` in the method map.

        Raises:
            LatherError: If ``method`` is not in the map.
        """
        action = self.method_map.get(method)
        if action is None:
            raise LatherError(f"No action mapped for method {method!r}")
        return self.invoke(action, soap_action, fill)

    def dispatch(self, doc: Document, soap_action: str | None) -> Any:
        """Send ``doc`` and classify the response. See the module docstring."""
        hooks = self.hooks
        if hooks.on_before_dispatch is not None:
            hooks.on_before_dispatch(doc)

        uri = self.endpoint.uri
        headers = {"Content-Type": f"{self.endpoint.request_content_type()};charset=UTF-8"}
        if soap_action is not None:
            headers["SOAPAction"] = soap_action
        body = doc.to_bytes()

        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug(
                "SOAP request: uri=%s\n%s\n%s",
                uri,
                "\n".join(f"{k}: {v}" for k, v in headers.items()),
                doc.to_text(pretty=True),
            )

        raw = self.transport.send(
            uri, body, headers, on_client=hooks.on_after_create_http_client
        )

        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug(
                "SOAP response: status=%d, content_type=%s\n%s",
                raw.status,
                raw.content_type,
                pretty_format_envelope(raw.body.decode("utf-8", errors="replace"), self.xml_driver),
            )

        response = Response(raw, self.endpoint.envelope_namespace(), self.xml_driver)
        fault = response.fault
        if fault is not None:
            _logger.info("SOAP fault from %s: %s", uri, fault)
            return (hooks.on_fault or default_on_fault)(fault)
        if raw.status >= 300:
            _logger.info("HTTP error %d from %s", raw.status, uri)
            return (hooks.on_http_error or default_on_http_error)(raw.status, raw.body)
        document = response.document
        if document is None:
            _logger.info(
                "Response from %s is not a SOAP envelope: %r",
                uri,
                raw.body[:XML_PREVIEW_LENGTH],
            )
            return (hooks.on_missing_document or default_on_missing_document)(response)
        if hooks.on_response_document is not None:
            hooks.on_response_document(document)
        return response
