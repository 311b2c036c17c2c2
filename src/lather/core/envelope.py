"""
SOAP envelope builder.

Requests are assembled as a small declarative tree and rendered to text
in one pass::

    doc = build_envelope(SOAP11_NAMESPACE)
    doc.alias("m", "http://example.com/stock")
    quote = doc.find("Body").add("m:GetQuote")
    quote.add("m:Symbol", "ACME")
    payload = doc.to_bytes()

Namespace prefixes are resolved when the tree is rendered, not when an
element is added, so hooks may declare aliases after elements that use
them have been created.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape as _xml_escape

from ..errors import LatherError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

__all__ = ["Document", "Element", "build_envelope", "xml_escape"]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Prefixes reserved by XML Namespaces
_RESERVED_PREFIXES = ("xml", "xmlns")

_INVALID_NAME_CHARS = frozenset(" \t\r\n<>&\"'=/")


def xml_escape(s: str) -> str:
    """Escape XML special characters in text and attribute values."""
    return _xml_escape(s, {'"': "&quot;", "'": "&apos;"})


def _to_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return str(value)


def _split_name(name: str) -> tuple[str | None, str]:
    prefix, sep, local = name.partition(":")
    if not sep:
        prefix, local = "", name
    if not local or ":" in local or _INVALID_NAME_CHARS.intersection(name) or (sep and not prefix):
        raise LatherError(f"Invalid element name {name!r}")
    return (prefix if sep else None), local


class _Node:
    """Common behaviour of documents and elements: children, aliases, lookup."""

    def __init__(self, parent: _Node | None = None) -> None:
        self._parent = parent
        self._children: list[Element] = []
        self._aliases: dict[str, str] = {}

    @property
    def parent(self) -> _Node | None:
        return self._parent

    @property
    def children(self) -> tuple[Element, ...]:
        return tuple(self._children)

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def alias(self, prefix: str, namespace: str) -> None:
        """Declare ``xmlns:prefix="namespace"`` on this node."""
        if not prefix or prefix in _RESERVED_PREFIXES or ":" in prefix:
            raise LatherError(f"Invalid namespace prefix {prefix!r}")
        self._aliases[prefix] = namespace

    def namespace_for(self, prefix: str) -> str | None:
        """Resolve a prefix against this node and its ancestors."""
        node: _Node | None = self
        while node is not None:
            if prefix in node._aliases:
                return node._aliases[prefix]
            node = node._parent
        return None

    def _inherited_prefix(self) -> str | None:
        return None

    def add(
        self,
        name: str,
        value: object = None,
        *,
        raw: bool = False,
        attributes: Mapping[str, object] | None = None,
    ) -> Element:
        """
        Append a child element and return it.

        Args:
            name: ``prefix:local``, ``*:local`` (reuse this node's prefix)
                or a bare local name.
            value: Text content; ``None`` for none.
            raw: Insert ``value`` verbatim as an XML fragment.
            attributes: Attributes to set on the new element.
        """
        prefix, local = _split_name(name)
        if prefix == "*":
            prefix = self._inherited_prefix()
        child = Element(self, prefix, local, value, raw=raw)
        for attr_name, attr_value in (attributes or {}).items():
            child.set_attr(attr_name, attr_value)
        self._children.append(child)
        return child

    def _iter(self) -> Iterator[Element]:
        """Elements in document order, self first when it is an element."""
        stack: list[_Node] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Element):
                yield node
            stack.extend(reversed(node._children))

    def find(self, name: str) -> Element | None:
        """First element whose local or qualified name equals ``name``."""
        for element in self._iter():
            if name in (element.name, element.full_name):
                return element
        return None

    def find_all(self, name: str) -> list[Element]:
        return [e for e in self._iter() if name in (e.name, e.full_name)]


class Element(_Node):
    """A request element: qualified name, attributes, text and children."""

    def __init__(
        self,
        parent: _Node,
        prefix: str | None,
        name: str,
        value: object = None,
        *,
        raw: bool = False,
    ) -> None:
        super().__init__(parent)
        self.prefix = prefix
        self.name = name
        self._attributes: dict[str, str] = {}
        self._value: str | None = None
        self._raw = False
        self.set_value(value, raw=raw)

    @property
    def full_name(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name

    @property
    def value(self) -> str | None:
        return self._value

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self._attributes)

    def _inherited_prefix(self) -> str | None:
        return self.prefix

    def set_value(self, value: object, raw: bool = False) -> None:
        self._value = None if value is None else _to_text(value)
        self._raw = raw

    def set_attr(self, name: str, value: object) -> None:
        _split_name(name)
        self._attributes[name] = _to_text(value)

    def _check_prefix(self, prefix: str | None, what: str) -> None:
        if prefix is None or prefix in _RESERVED_PREFIXES:
            return
        if self.namespace_for(prefix) is None:
            raise LatherError(f"Undefined namespace prefix {prefix!r} on {what}")

    def _start_tag(self, extra_aliases: Mapping[str, str]) -> str:
        self._check_prefix(self.prefix, f"element {self.full_name!r}")
        parts = [f"<{self.full_name}"]
        declared = dict(extra_aliases)
        declared.update(self._aliases)
        for prefix, uri in declared.items():
            parts.append(f' xmlns:{prefix}="{xml_escape(uri)}"')
        for name, value in self._attributes.items():
            attr_prefix, _ = _split_name(name)
            self._check_prefix(attr_prefix, f"attribute {name!r}")
            parts.append(f' {name}="{xml_escape(value)}"')
        return "".join(parts)

    def _text(self) -> str | None:
        if self._value is None:
            return None
        return self._value if self._raw else xml_escape(self._value)

    def to_text(self, pretty: bool = False, extra_aliases: Mapping[str, str] | None = None) -> str:
        """Render this element and its subtree.

        Iterative, so nesting depth is not bounded by the recursion limit.
        """
        parts: list[str] = []
        stack: list[tuple[Element, int, bool]] = [(self, 0, False)]
        while stack:
            element, depth, closing = stack.pop()
            pad = "\n" + "  " * depth if pretty else ""
            if closing:
                parts.append(f"{pad}</{element.full_name}>")
                continue
            aliases = extra_aliases if element is self and extra_aliases else {}
            parts.append((pad if depth else "") + element._start_tag(aliases))
            text = element._text()
            if text is None and not element._children:
                parts.append("/>")
                continue
            parts.append(">")
            if text:
                parts.append(text)
            if not element._children:
                parts.append(f"</{element.full_name}>")
                continue
            stack.append((element, depth, True))
            stack.extend((child, depth + 1, False) for child in reversed(element._children))
        return "".join(parts)

    def __repr__(self) -> str:
        return f"<Element {self.full_name!r}>"


class Document(_Node):
    """Root of a request tree. Holds exactly one root element.

    Aliases declared on the document are rendered on the root element.
    """

    @property
    def root(self) -> Element | None:
        return self._children[0] if self._children else None

    def add(
        self,
        name: str,
        value: object = None,
        *,
        raw: bool = False,
        attributes: Mapping[str, object] | None = None,
    ) -> Element:
        if self._children:
            raise LatherError("A document can only have one root element")
        return super().add(name, value, raw=raw, attributes=attributes)

    def to_text(self, pretty: bool = False) -> str:
        if self.root is None:
            raise LatherError("Cannot serialize an empty document")
        separator = "\n" if pretty else ""
        return XML_DECLARATION + separator + self.root.to_text(pretty, self._aliases)

    def to_bytes(self) -> bytes:
        return self.to_text().encode("utf-8")

    def __str__(self) -> str:
        return self.to_text()


def build_envelope(
    namespace: str, fill_body: Callable[[Element], None] | None = None
) -> Document:
    """
    Create a standard SOAP envelope.

    The document declares ``env`` for ``namespace`` and holds
    ``env:Envelope`` with an empty ``env:Header`` and an ``env:Body``.

    Args:
        namespace: SOAP envelope namespace URI.
        fill_body: Called with the Body element to add content.

    Returns:
        The envelope document.
    """
    doc = Document()
    doc.alias("env", namespace)
    envelope = doc.add("env:Envelope")
    envelope.add("*:Header")
    body = envelope.add("*:Body")
    if fill_body is not None:
        fill_body(body)
    return doc
