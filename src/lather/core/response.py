"""SOAP response classification and fault extraction."""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING

from ..errors import ConfigError, Fault, XmlParseError

if TYPE_CHECKING:
    from ..network.protocol import RawResponse
    from ..xmlquery.base import BaseNode, DocumentPort

__all__ = ["Response", "extract_fault"]

_logger = logging.getLogger(__name__)


def _text_of(node: BaseNode, expression: str, ns: dict[str, str]) -> str:
    found = node.first(expression, ns)
    return found.value.strip() if found is not None else ""


def extract_fault(node: BaseNode, namespace: str | None) -> Fault:
    """
    Build a Fault from a ``Fault`` element.

    SOAP 1.2 shapes (``Code/Value``, ``Reason/Text``) are probed first,
    then the SOAP 1.1 ones (``faultcode``, ``faultstring``).  Detail
    entries are application-defined, so ``detail`` is looked up without
    a namespace; the namespaced SOAP 1.2 ``Detail`` is the fallback.

    Args:
        node: The Fault element.
        namespace: SOAP envelope namespace of the response.

    Raises:
        ConfigError: If no namespace is given.
    """
    if not namespace:
        raise ConfigError("Missing SOAP namespace for fault extraction")
    ns = {"env": namespace}

    code = _text_of(node, "./env:Code/env:Value", ns)
    if not code:
        code = _text_of(node, "./faultcode", ns)

    reason = _text_of(node, "./env:Reason/env:Text[1]", ns)
    if not reason:
        reason = _text_of(node, "./faultstring", ns)

    details = node.xpath("./detail/*", ns)
    if not details:
        details = node.xpath("./env:Detail/*", ns)

    return Fault(code, reason, tuple(details))


class Response:
    """A SOAP response: the raw HTTP answer plus lazy classification.

    ``document`` and ``fault`` are each computed at most once, on first
    access.  A body that does not parse is a valid outcome: ``document``
    is then ``None``.

    Args:
        raw: The HTTP response.
        soap_namespace: Envelope namespace of the active SOAP version.
        xml_driver: Driver used to parse the body.
    """

    def __init__(self, raw: RawResponse, soap_namespace: str, xml_driver: DocumentPort) -> None:
        self._raw = raw
        self._soap_namespace = soap_namespace
        self._xml_driver = xml_driver

    @property
    def raw(self) -> RawResponse:
        return self._raw

    @property
    def status(self) -> int:
        return self._raw.status

    @property
    def body(self) -> bytes:
        return self._raw.body

    @property
    def content_type(self) -> str:
        return self._raw.content_type

    @property
    def soap_namespace(self) -> str:
        return self._soap_namespace

    @cached_property
    def document(self) -> BaseNode | None:
        try:
            return self._xml_driver.parse(self._raw.body)
        except XmlParseError as e:
            _logger.debug("Response body is not XML: %s", e)
            return None

    @property
    def has_document(self) -> bool:
        return self.document is not None

    @cached_property
    def fault(self) -> Fault | None:
        document = self.document
        if document is None:
            return None
        if document.local_name != "Envelope" or document.namespace != self._soap_namespace:
            return None
        ns = {"env": self._soap_namespace}
        node = document.first("./env:Body//env:Fault", ns)
        if node is None:
            return None
        fault = extract_fault(node, self._soap_namespace)
        _logger.debug("SOAP fault in response: code=%s, reason=%s", fault.code, fault.reason)
        return fault

    @property
    def has_fault(self) -> bool:
        return self.fault is not None

    def __repr__(self) -> str:
        return f"<Response status={self.status} content_type={self.content_type!r}>"
