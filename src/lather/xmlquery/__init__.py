"""XML query drivers: parse response bodies into queryable nodes."""

from __future__ import annotations

from ..config.settings import get_xml_driver_name
from ..errors import ConfigError
from .base import BaseNode, DocumentPort
from .etree_driver import EtreeDriver

__all__ = [
    "XML_DRIVERS",
    "BaseNode",
    "DocumentPort",
    "EtreeDriver",
    "get_xml_driver",
    "parse_document",
]

XML_DRIVERS = ("etree", "lxml")


def _require_lxml_driver() -> type:
    """Import the lxml driver on first use.

    Services that stay on the etree driver never load lxml.  A broken or
    missing lxml install surfaces as a ConfigError naming the driver.
    """
    try:
        from .lxml_driver import LxmlDriver
    except ImportError as exc:
        raise ConfigError(
            "lxml is required for the 'lxml' XML driver.\nInstall with: pip install lxml"
        ) from exc
    else:
        return LxmlDriver


def get_xml_driver(name: str | None = None) -> DocumentPort:
    """
    Instantiate an XML query driver by name.

    Args:
        name: "etree" or "lxml".  Defaults to the LATHER_XML_DRIVER
            environment setting.

    Raises:
        ConfigError: If the driver name is unknown.
    """
    name = name or get_xml_driver_name()
    if name == "etree":
        return EtreeDriver()
    if name == "lxml":
        return _require_lxml_driver()()
    raise ConfigError(f"Unknown XML driver {name!r} (expected one of {', '.join(XML_DRIVERS)})")


def parse_document(data: bytes | str, driver: DocumentPort | None = None) -> BaseNode:
    """Parse ``data`` with ``driver`` (or the configured default)."""
    return (driver or get_xml_driver()).parse(data)
