"""XML query driver backed by ElementTree, parsed through defusedxml.

Queries use ElementPath, the XPath subset ElementTree understands:
relative paths, ``//``, ``*``, positional predicates and prefixed names.
Absolute paths and functions such as ``text()`` are not available.
"""

from __future__ import annotations

import copy
import logging
from xml.etree.ElementTree import Element, indent, tostring
from xml.etree.ElementTree import ParseError as _XMLParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ..errors import LatherError, XmlParseError
from .base import BaseNode

__all__ = ["EtreeDriver", "EtreeNode"]

_logger = logging.getLogger(__name__)


class EtreeNode(BaseNode):
    """A parsed ElementTree element."""

    def __init__(self, element: Element, namespaces: dict[str, str] | None = None) -> None:
        super().__init__(namespaces)
        self._element = element

    @property
    def element(self) -> Element:
        return self._element

    def xpath(self, expression: str, namespaces: dict[str, str] | None = None) -> list[BaseNode]:
        try:
            found = self._element.findall(expression, self._bindings(namespaces))
        except SyntaxError as e:
            raise LatherError(f"Unsupported query {expression!r}: {e}") from e
        return [EtreeNode(elem, self._namespaces) for elem in found]

    @property
    def value(self) -> str:
        return "".join(self._element.itertext())

    @property
    def local_name(self) -> str:
        return self._element.tag.split("}")[-1]

    @property
    def namespace(self) -> str | None:
        tag = self._element.tag
        return tag[1:].split("}")[0] if tag.startswith("{") else None

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._element.get(name, default)

    def to_text(self, pretty: bool = False) -> str:
        element = self._element
        if pretty:
            # indent() mutates in place; the parsed tree stays untouched
            element = copy.deepcopy(element)
            indent(element)
        return tostring(element, encoding="unicode")


class EtreeDriver:
    """Parses with defusedxml, which refuses entity expansion attacks."""

    name = "etree"

    def parse(self, data: bytes | str) -> BaseNode:
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            root = ET.fromstring(data)
        except (_XMLParseError, DefusedXmlException) as e:
            _logger.debug("etree parse failed: %s", e)
            raise XmlParseError(f"Invalid XML: {e}") from e
        return EtreeNode(root)
