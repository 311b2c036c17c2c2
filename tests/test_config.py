"""Tests for lather.config -- endpoint binding and environment settings."""

import dataclasses
import logging

import pytest

from lather.config import (
    EndpointConfig,
    configure,
    envelope_namespace_for,
    get_http_driver_name,
    get_timeout,
    get_xml_driver_name,
)
from lather.constants import (
    DEFAULT_TIMEOUT_HTTP_POST,
    ENV_HTTP_DRIVER,
    ENV_TIMEOUT,
    ENV_XML_DRIVER,
    SOAP11_NAMESPACE,
    SOAP12_NAMESPACE,
)
from lather.errors import ConfigError

# ── Endpoint ────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("version", "namespace", "content_type"),
    [
        (1, SOAP11_NAMESPACE, "text/xml"),
        (2, SOAP12_NAMESPACE, "application/soap+xml"),
    ],
    ids=["soap11", "soap12"],
)
@pytest.mark.parametrize("uri", ["http://x/svc", "https://example.com:8443/ws?wsdl"])
def test_version_table(version, namespace, content_type, uri):
    endpoint = configure(version, uri)
    assert endpoint.envelope_namespace() == namespace
    assert endpoint.request_content_type() == content_type
    assert endpoint.uri == uri


@pytest.mark.parametrize("version", [0, 3, "1", 1.5, True, None], ids=repr)
def test_unknown_version_fails(version):
    with pytest.raises(ConfigError):
        configure(version, "http://x/svc")


@pytest.mark.parametrize("uri", [None, "", "   "], ids=["none", "empty", "blank"])
def test_missing_uri_fails(uri):
    with pytest.raises(ConfigError, match="uri"):
        configure(1, uri)


def test_endpoint_is_frozen():
    endpoint = configure(1, "http://x/svc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        endpoint.version = 2  # type: ignore[misc]


def test_endpoint_direct_construction_validates():
    with pytest.raises(ConfigError, match="Unknown protocol version"):
        EndpointConfig(version=7, uri="http://x/svc")


def test_envelope_namespace_for_unknown():
    with pytest.raises(ConfigError, match="Unknown protocol version"):
        envelope_namespace_for(42)


# ── Settings ────────────────────────────────────────────────────────


def test_driver_names_default(monkeypatch):
    monkeypatch.delenv(ENV_HTTP_DRIVER, raising=False)
    monkeypatch.delenv(ENV_XML_DRIVER, raising=False)
    assert get_http_driver_name() == "urllib"
    assert get_xml_driver_name() == "etree"


def test_driver_names_from_env(monkeypatch):
    monkeypatch.setenv(ENV_HTTP_DRIVER, " Legacy_TLS ")
    monkeypatch.setenv(ENV_XML_DRIVER, "LXML")
    assert get_http_driver_name() == "legacy_tls"
    assert get_xml_driver_name() == "lxml"


def test_timeout_default(monkeypatch):
    monkeypatch.delenv(ENV_TIMEOUT, raising=False)
    assert get_timeout() == DEFAULT_TIMEOUT_HTTP_POST


def test_timeout_from_env(monkeypatch):
    monkeypatch.setenv(ENV_TIMEOUT, "45")
    assert get_timeout() == 45


@pytest.mark.parametrize("value", ["abc", "0", "99999", "-5"], ids=["nan", "zero", "huge", "neg"])
def test_timeout_invalid_falls_back(monkeypatch, caplog, value):
    monkeypatch.setenv(ENV_TIMEOUT, value)
    with caplog.at_level(logging.WARNING, logger="lather.config.settings"):
        assert get_timeout() == DEFAULT_TIMEOUT_HTTP_POST
    assert ENV_TIMEOUT in caplog.text
