"""
Driver selection and transport settings from the environment.

Every value is read at call time so tests and long-running processes
can change the environment between calls.  Invalid values are logged
and replaced by the defaults instead of failing the caller.
"""

from __future__ import annotations

__all__ = ["get_http_driver_name", "get_timeout", "get_xml_driver_name"]

import logging
import os

from ..constants import (
    DEFAULT_HTTP_DRIVER,
    DEFAULT_TIMEOUT_HTTP_POST,
    DEFAULT_XML_DRIVER,
    ENV_HTTP_DRIVER,
    ENV_TIMEOUT,
    ENV_XML_DRIVER,
    MAX_TIMEOUT,
    MIN_TIMEOUT,
)

_logger = logging.getLogger(__name__)


def get_http_driver_name() -> str:
    """Name of the HTTP transport driver to use when none is given."""
    return os.environ.get(ENV_HTTP_DRIVER, "").strip().lower() or DEFAULT_HTTP_DRIVER


def get_xml_driver_name() -> str:
    """Name of the XML query driver to use when none is given."""
    return os.environ.get(ENV_XML_DRIVER, "").strip().lower() or DEFAULT_XML_DRIVER


def get_timeout() -> int:
    """
    Resolve the transport timeout in seconds.

    Priority: env var > default.  Values outside
    [MIN_TIMEOUT, MAX_TIMEOUT] fall back to the default with a warning.
    """
    timeout_str = os.environ.get(ENV_TIMEOUT, "").strip()
    if not timeout_str:
        return DEFAULT_TIMEOUT_HTTP_POST

    try:
        timeout = int(timeout_str)
    except ValueError:
        _logger.warning("Invalid %s value %r, using default", ENV_TIMEOUT, timeout_str)
        return DEFAULT_TIMEOUT_HTTP_POST

    if timeout < MIN_TIMEOUT or timeout > MAX_TIMEOUT:
        _logger.warning(
            "%s=%d out of range [%d, %d], using default",
            ENV_TIMEOUT,
            timeout,
            MIN_TIMEOUT,
            MAX_TIMEOUT,
        )
        return DEFAULT_TIMEOUT_HTTP_POST
    return timeout
