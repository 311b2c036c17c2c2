"""
Driver-neutral interface for parsed XML documents.

A driver turns bytes into a tree of ``BaseNode`` objects.  The core
only relies on what is declared here, so any XML library that can
answer namespace-aware path queries can back a ``Response``.
"""

from __future__ import annotations

import datetime
from abc import ABC, abstractmethod
from typing import Protocol

__all__ = ["BaseNode", "DocumentPort"]


class DocumentPort(Protocol):
    """Protocol for XML query drivers."""

    name: str

    def parse(self, data: bytes | str) -> BaseNode:
        """
        Parse raw bytes into the root node of a queryable document.

        Raises:
            XmlParseError: If the input is not well-formed XML.
        """
        ...


class BaseNode(ABC):
    """An element of a parsed document.

    Every node of a document shares one prefix map.  Prefixes added with
    ``register_namespace`` on any node are visible to queries on all of
    them, which lets a response hook bind service namespaces once.
    """

    def __init__(self, namespaces: dict[str, str] | None = None) -> None:
        self._namespaces = namespaces if namespaces is not None else {}

    # ── Driver surface ───────────────────────────────────────────────

    @abstractmethod
    def xpath(self, expression: str, namespaces: dict[str, str] | None = None) -> list[BaseNode]:
        """Select element nodes relative to this node."""

    @property
    @abstractmethod
    def value(self) -> str:
        """String value: the concatenated text of this node and its descendants."""

    @property
    @abstractmethod
    def local_name(self) -> str: ...

    @property
    @abstractmethod
    def namespace(self) -> str | None: ...

    @abstractmethod
    def get(self, name: str, default: str | None = None) -> str | None:
        """Attribute value by name (Clark notation for namespaced attributes)."""

    @abstractmethod
    def to_text(self, pretty: bool = False) -> str:
        """Serialize this node and its subtree to XML text."""

    # ── Shared helpers ───────────────────────────────────────────────

    def register_namespace(self, prefix: str, uri: str) -> None:
        self._namespaces[prefix] = uri

    @property
    def namespaces(self) -> dict[str, str]:
        return dict(self._namespaces)

    def _bindings(self, namespaces: dict[str, str] | None) -> dict[str, str]:
        merged = dict(self._namespaces)
        if namespaces:
            merged.update(namespaces)
        return merged

    def first(self, expression: str, namespaces: dict[str, str] | None = None) -> BaseNode | None:
        nodes = self.xpath(expression, namespaces)
        return nodes[0] if nodes else None

    def _target(self, expression: str | None, namespaces: dict[str, str] | None) -> BaseNode | None:
        if expression is None:
            return self
        return self.first(expression, namespaces)

    def to_str(
        self, expression: str | None = None, namespaces: dict[str, str] | None = None
    ) -> str | None:
        node = self._target(expression, namespaces)
        return None if node is None else node.value

    def to_int(
        self, expression: str | None = None, namespaces: dict[str, str] | None = None
    ) -> int | None:
        text = self.to_str(expression, namespaces)
        return None if text is None else int(text.strip())

    def to_float(
        self, expression: str | None = None, namespaces: dict[str, str] | None = None
    ) -> float | None:
        text = self.to_str(expression, namespaces)
        return None if text is None else float(text.strip())

    def to_boolean(
        self, expression: str | None = None, namespaces: dict[str, str] | None = None
    ) -> bool | None:
        """xsd:boolean: ``true``/``1`` are True, anything else False."""
        text = self.to_str(expression, namespaces)
        return None if text is None else text.strip().lower() in ("true", "1")

    def to_date(
        self, expression: str | None = None, namespaces: dict[str, str] | None = None
    ) -> datetime.datetime | None:
        """Parse an ISO 8601 timestamp (a trailing ``Z`` means UTC)."""
        text = self.to_str(expression, namespaces)
        if text is None:
            return None
        text = text.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.datetime.fromisoformat(text)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.local_name!r} namespace={self.namespace!r}>"
