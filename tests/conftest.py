"""Shared test fixtures for the Lather test suite."""

from __future__ import annotations

import pytest

from lather.constants import SOAP11_NAMESPACE, SOAP12_NAMESPACE
from lather.network.protocol import RawResponse
from lather.xmlquery import get_xml_driver


class StubTransport:
    """In-memory TransportPort: records requests, replays a canned response."""

    name = "stub"

    def __init__(self, response: RawResponse | None = None, client: object = None) -> None:
        self.response = response or RawResponse(200, soap_envelope(SOAP11_NAMESPACE, ""), "")
        self.client = client if client is not None else object()
        self.requests: list[tuple[str, bytes, dict[str, str]]] = []

    def send(self, uri, body, headers, *, on_client=None):
        if on_client is not None:
            on_client(self.client)
        self.requests.append((uri, body, dict(headers)))
        return self.response


def soap_envelope(namespace: str, body: str) -> bytes:
    """Serialized envelope with ``body`` as the content of env:Body."""
    return (
        f'<env:Envelope xmlns:env="{namespace}"><env:Body>{body}</env:Body></env:Envelope>'
    ).encode()


SOAP11_FAULT = (
    "<env:Fault>"
    "<faultcode>env:Client</faultcode>"
    "<faultstring>Invalid symbol</faultstring>"
    "<detail><Reason>unknown</Reason><Symbol>XYZ</Symbol></detail>"
    "</env:Fault>"
)

SOAP12_FAULT = (
    "<env:Fault>"
    "<env:Code><env:Value>env:Client</env:Value></env:Code>"
    '<env:Reason><env:Text xml:lang="en">Invalid symbol</env:Text>'
    '<env:Text xml:lang="fr">Symbole invalide</env:Text></env:Reason>'
    "</env:Fault>"
)


@pytest.fixture(params=["etree", "lxml"])
def xml_driver(request):
    """Each XML query driver in turn."""
    return get_xml_driver(request.param)


@pytest.fixture
def soap11_ns():
    return SOAP11_NAMESPACE


@pytest.fixture
def soap12_ns():
    return SOAP12_NAMESPACE


@pytest.fixture
def stub_transport():
    return StubTransport()
