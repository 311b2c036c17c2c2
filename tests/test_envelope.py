"""Tests for lather.core.envelope -- request tree building and rendering."""

import datetime

import pytest

from lather.constants import SOAP11_NAMESPACE, SOAP12_NAMESPACE
from lather.core.envelope import XML_DECLARATION, Document, build_envelope, xml_escape
from lather.errors import LatherError

# ── xml_escape ──────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("input_str", "expected"),
    [
        ("hello", "hello"),
        ("a&b", "a&amp;b"),
        ("<tag>", "&lt;tag&gt;"),
        ("a\"b'c", "a&quot;b&apos;c"),
    ],
    ids=["plain", "amp", "lt_gt", "quotes"],
)
def test_xml_escape(input_str, expected):
    assert xml_escape(input_str) == expected


# ── build_envelope ──────────────────────────────────────────────────


def test_envelope_shape():
    doc = build_envelope(SOAP11_NAMESPACE)
    assert doc.to_text() == (
        XML_DECLARATION + f'<env:Envelope xmlns:env="{SOAP11_NAMESPACE}">'
        "<env:Header/><env:Body/></env:Envelope>"
    )


def test_header_and_body_inherit_prefix():
    doc = build_envelope(SOAP12_NAMESPACE)
    assert doc.find("Header").full_name == "env:Header"
    assert doc.find("Body").full_name == "env:Body"
    assert doc.root.full_name == "env:Envelope"


def test_fill_body_receives_body():
    seen = []
    build_envelope(SOAP11_NAMESPACE, seen.append)
    assert len(seen) == 1
    assert seen[0].name == "Body"


def test_body_content_rendered():
    doc = build_envelope(SOAP11_NAMESPACE, lambda body: body.add("GetFoo").add("Id", 42))
    assert "<env:Body><GetFoo><Id>42</Id></GetFoo></env:Body>" in doc.to_text()


def test_to_bytes_is_utf8():
    doc = build_envelope(SOAP11_NAMESPACE, lambda body: body.add("Name", "Ответ"))
    assert "Ответ".encode() in doc.to_bytes()


# ── Elements ────────────────────────────────────────────────────────


def test_values_are_escaped():
    doc = Document()
    doc.add("a", "<b> & 'c'")
    assert doc.to_text().endswith("<a>&lt;b&gt; &amp; &apos;c&apos;</a>")


def test_raw_value_inserted_verbatim():
    doc = Document()
    doc.add("a", "<b>1</b>", raw=True)
    assert doc.to_text().endswith("<a><b>1</b></a>")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, "true"),
        (False, "false"),
        (12, "12"),
        (1.5, "1.5"),
        (datetime.date(2024, 2, 29), "2024-02-29"),
        (datetime.datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
    ],
    ids=["true", "false", "int", "float", "date", "datetime"],
)
def test_value_conversion(value, expected):
    doc = Document()
    doc.add("v", value)
    assert doc.to_text().endswith(f"<v>{expected}</v>")


def test_empty_string_value_not_self_closing():
    doc = Document()
    doc.add("v", "")
    assert doc.to_text().endswith("<v></v>")


def test_attributes_rendered_and_escaped():
    doc = Document()
    el = doc.add("a", attributes={"id": 1, "note": 'x"y'})
    el.set_attr("flag", True)
    assert doc.to_text().endswith('<a id="1" note="x&quot;y" flag="true"/>')


def test_alias_declared_on_owning_element():
    doc = build_envelope(SOAP11_NAMESPACE)
    body = doc.find("Body")
    op = body.add("m:GetQuote")
    op.alias("m", "urn:stock")
    op.add("m:Symbol", "ACME")
    text = doc.to_text()
    assert '<m:GetQuote xmlns:m="urn:stock"><m:Symbol>ACME</m:Symbol></m:GetQuote>' in text


def test_prefix_resolved_at_render_time():
    """An alias may be declared after the element using it was added."""
    doc = build_envelope(SOAP11_NAMESPACE, lambda body: body.add("ns:DoWork"))
    doc.alias("ns", "urn:work")
    text = doc.to_text()
    assert 'xmlns:ns="urn:work"' in text
    assert "<ns:DoWork/>" in text


def test_undefined_prefix_fails_on_render():
    doc = build_envelope(SOAP11_NAMESPACE, lambda body: body.add("ns:DoWork"))
    with pytest.raises(LatherError, match="Undefined namespace prefix 'ns'"):
        doc.to_text()


def test_undefined_attribute_prefix_fails_on_render():
    doc = Document()
    doc.add("a", attributes={"xsi:type": "xsd:string"})
    with pytest.raises(LatherError, match="xsi"):
        doc.to_text()


def test_xml_prefix_needs_no_alias():
    doc = Document()
    doc.add("a", attributes={"xml:lang": "en"})
    assert doc.to_text().endswith('<a xml:lang="en"/>')


def test_add_accepts_qualified_attribute_names():
    doc = Document()
    doc.alias("xsi", "http://www.w3.org/2001/XMLSchema-instance")
    root = doc.add("Value", "7", attributes={"xsi:type": "xsd:int", "id": "v1"})
    assert root.attributes == {"xsi:type": "xsd:int", "id": "v1"}
    assert ' xsi:type="xsd:int" id="v1">7</Value>' in doc.to_text()


@pytest.mark.parametrize(
    "name",
    ["", "a b", "<a>", ":a", "a:", "a:b:c"],
    ids=["empty", "space", "brackets", "no_prefix", "no_local", "two_colons"],
)
def test_invalid_names_rejected(name):
    doc = Document()
    with pytest.raises(LatherError, match="Invalid element name"):
        doc.add(name)


@pytest.mark.parametrize("prefix", ["", "xmlns", "xml", "a:b"])
def test_invalid_alias_prefix(prefix):
    with pytest.raises(LatherError, match="Invalid namespace prefix"):
        Document().alias(prefix, "urn:x")


def test_document_single_root():
    doc = Document()
    doc.add("a")
    with pytest.raises(LatherError, match="one root"):
        doc.add("b")


def test_empty_document_cannot_render():
    with pytest.raises(LatherError, match="empty document"):
        Document().to_text()


# ── find ────────────────────────────────────────────────────────────


def test_find_by_local_name_ignores_prefix():
    doc = build_envelope(SOAP11_NAMESPACE)
    assert doc.find("Body") is doc.find("env:Body")


def test_find_first_match_in_document_order():
    doc = Document()
    root = doc.add("root")
    first = root.add("a").add("item", 1)
    root.add("item", 2)
    assert doc.find("item") is first
    assert [e.value for e in doc.find_all("item")] == ["1", "2"]


def test_find_missing_returns_none():
    assert build_envelope(SOAP11_NAMESPACE).find("Nope") is None


def test_find_from_element_includes_self():
    doc = build_envelope(SOAP11_NAMESPACE)
    body = doc.find("Body")
    assert body.find("Body") is body
    assert body.find("Header") is None


# ── Rendering ───────────────────────────────────────────────────────


def test_deep_nesting_renders():
    doc = Document()
    node = doc.add("n")
    for _ in range(5000):
        node = node.add("n")
    text = doc.to_text()
    assert text.count("<n>") == 5000
    assert text.count("</n>") == 5000
    assert text.endswith("</n>" * 5000)


def test_rendering_is_stable():
    doc = build_envelope(SOAP12_NAMESPACE, lambda body: body.add("A").add("B", "x"))
    assert doc.to_text() == doc.to_text()
    assert str(doc) == doc.to_text()


def test_pretty_rendering():
    doc = build_envelope(SOAP11_NAMESPACE, lambda body: body.add("GetFoo").add("Id", 1))
    lines = doc.to_text(pretty=True).splitlines()
    assert lines[0] == XML_DECLARATION
    assert lines[1].startswith("<env:Envelope")
    assert "  <env:Header/>" in lines
    assert "      <Id>1</Id>" in lines
    assert lines[-1] == "</env:Envelope>"


def test_roundtrip_through_parser(xml_driver):
    doc = build_envelope(
        SOAP11_NAMESPACE,
        lambda body: body.add("Foo").add("Item", "a < b & c"),
    )
    parsed = xml_driver.parse(doc.to_bytes())
    foo = parsed.first("./env:Body/Foo", {"env": SOAP11_NAMESPACE})
    assert foo is not None
    assert foo.to_str("./Item") == "a < b & c"
