"""XML query driver backed by lxml, with full XPath 1.0 support."""

from __future__ import annotations

import logging

from lxml import etree

from ..errors import LatherError, XmlParseError
from .base import BaseNode

__all__ = ["LxmlDriver", "LxmlNode"]

_logger = logging.getLogger(__name__)


def _make_parser() -> etree.XMLParser:
    """Parser that neither expands external entities nor touches the network."""
    return etree.XMLParser(resolve_entities=False, no_network=True)


class LxmlNode(BaseNode):
    """A parsed lxml element."""

    def __init__(self, element: etree._Element, namespaces: dict[str, str] | None = None) -> None:
        super().__init__(namespaces)
        self._element = element

    @property
    def element(self) -> etree._Element:
        return self._element

    def xpath(self, expression: str, namespaces: dict[str, str] | None = None) -> list[BaseNode]:
        # XPath has no default namespace; lxml rejects an empty prefix
        bindings = {k: v for k, v in self._bindings(namespaces).items() if k}
        try:
            found = self._element.xpath(expression, namespaces=bindings)
        except etree.XPathError as e:
            raise LatherError(f"Invalid XPath {expression!r}: {e}") from e
        if not isinstance(found, list):
            raise LatherError(f"XPath {expression!r} does not select nodes")
        # Comments and processing instructions have non-string tags
        return [
            LxmlNode(item, self._namespaces)
            for item in found
            if isinstance(item, etree._Element) and isinstance(item.tag, str)
        ]

    @property
    def value(self) -> str:
        return str(self._element.xpath("string()"))

    @property
    def local_name(self) -> str:
        return etree.QName(self._element).localname

    @property
    def namespace(self) -> str | None:
        return etree.QName(self._element).namespace

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._element.get(name, default)

    def to_text(self, pretty: bool = False) -> str:
        return etree.tostring(self._element, encoding="unicode", pretty_print=pretty)


class LxmlDriver:
    name = "lxml"

    def parse(self, data: bytes | str) -> BaseNode:
        if isinstance(data, str):
            # lxml refuses str input that carries an encoding declaration
            data = data.encode("utf-8")
        try:
            root = etree.fromstring(data, parser=_make_parser())
        except (etree.XMLSyntaxError, ValueError) as e:
            _logger.debug("lxml parse failed: %s", e)
            raise XmlParseError(f"Invalid XML: {e}") from e
        if root is None:
            raise XmlParseError("Invalid XML: empty document")
        return LxmlNode(root)
