"""Tests for the retailer-agnostic extraction helpers."""

import pytest

from preciazo.extract.errors import MalformedStructuredData, PriceParseError
from preciazo.extract.toolkit import (
    first_offer_availability,
    get_canonical_url,
    get_meta_prop,
    get_product_json_ld,
    is_in_stock,
    json_ld_image,
    parse_document,
    price_from_meta,
    price_from_text,
)


def _doc(head: str = "", body: str = ""):
    return parse_document(f"<html><head>{head}</head><body>{body}</body></html>")


def _price_doc(value: str):
    return _doc(f'<meta property="product:price:amount" content="{value}">')


def _ld_doc(*payloads: str):
    scripts = "".join(f'<script type="application/ld+json">{p}</script>' for p in payloads)
    return _doc(scripts)


def test_get_meta_prop_by_property():
    doc = _doc('<meta property="product:retailer_item_id" content="7790001">')
    assert get_meta_prop(doc, "product:retailer_item_id") == "7790001"


def test_get_meta_prop_by_name():
    doc = _doc('<meta name="description" content=" Yerba mate ">')
    assert get_meta_prop(doc, "description") == "Yerba mate"


def test_get_meta_prop_missing_returns_none():
    doc = _doc('<meta property="og:title" content="Yerba">')
    assert get_meta_prop(doc, "product:retailer_item_id") is None


def test_get_meta_prop_empty_content_returns_none():
    doc = _doc('<meta property="product:retailer_item_id" content="  ">')
    assert get_meta_prop(doc, "product:retailer_item_id") is None


def test_get_meta_prop_skips_empty_duplicate():
    doc = _doc(
        '<meta property="product:price:amount" content="">'
        '<meta property="product:price:amount" content="199.90">'
    )
    assert get_meta_prop(doc, "product:price:amount") == "199.90"
    assert price_from_meta(doc) == 19990


def test_parse_document_accepts_bytes_and_broken_markup():
    doc = parse_document(
        '<html><head><meta property="product:retailer_item_id" content="123">'
        "<body><div><p>unclosed".encode("utf-8")
    )
    assert get_meta_prop(doc, "product:retailer_item_id") == "123"


def test_parse_document_honors_declared_charset():
    page = '<html><head><meta charset="iso-8859-1"><meta name="description" content="Serenísima"></head></html>'
    doc = parse_document(page.encode("latin-1"))
    assert get_meta_prop(doc, "description") == "Serenísima"


def test_get_product_json_ld_top_level():
    doc = _ld_doc('{"@type": "Product", "name": "Yerba"}')
    assert get_product_json_ld(doc)["name"] == "Yerba"


def test_get_product_json_ld_skips_other_blocks():
    doc = _ld_doc(
        '{"@type": "BreadcrumbList", "itemListElement": []}',
        '[{"@type": "Organization"}, {"@type": ["Product", "Thing"], "name": "Arroz"}]',
    )
    assert get_product_json_ld(doc)["name"] == "Arroz"


def test_get_product_json_ld_in_graph():
    doc = _ld_doc('{"@context": "https://schema.org", "@graph": [{"@type": "WebPage"}, {"@type": "Product", "name": "Fideos"}]}')
    assert get_product_json_ld(doc)["name"] == "Fideos"


def test_get_product_json_ld_missing_block():
    with pytest.raises(MalformedStructuredData):
        get_product_json_ld(_doc(body="<p>no structured data</p>"))


def test_get_product_json_ld_unparseable():
    with pytest.raises(MalformedStructuredData, match="invalid JSON-LD"):
        get_product_json_ld(_ld_doc('{"@type": "Product", "name": '))


def test_get_product_json_ld_unparseable_block_next_to_product():
    doc = _ld_doc("{not json", '{"@type": "Product", "name": "Yerba"}')
    assert get_product_json_ld(doc)["name"] == "Yerba"


def test_get_product_json_ld_without_product():
    with pytest.raises(MalformedStructuredData, match="no Product"):
        get_product_json_ld(_ld_doc('{"@type": "Organization"}'))


@pytest.mark.parametrize(
    "value,expected",
    [
        ("12.34", 1234),
        ("0.00", 0),
        ("199.90", 19990),
        ("1500", 150000),
        ("0.005", 1),
    ],
)
def test_price_from_meta(value, expected):
    assert price_from_meta(_price_doc(value)) == expected


@pytest.mark.parametrize("value", ["abc", "12,34", "NaN", "-1.00"])
def test_price_from_meta_invalid(value):
    with pytest.raises(PriceParseError):
        price_from_meta(_price_doc(value))


def test_price_from_meta_absent_returns_none():
    assert price_from_meta(_doc()) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("$1.234,56", 123456),
        ("$ 199,90", 19990),
        ("199.90", 19990),
        ("$1.234", 123400),
        ("$ 45", 4500),
        ("1,234.56", 123456),
        ("PRECIO CONTADO $2.100.000,00", 210000000),
    ],
)
def test_price_from_text(text, expected):
    assert price_from_text(text) == expected


@pytest.mark.parametrize("text", ["sin precio", "", None])
def test_price_from_text_invalid(text):
    with pytest.raises(PriceParseError):
        price_from_text(text)


def test_first_offer_availability_aggregate():
    ld = {"offers": {"@type": "AggregateOffer", "offers": [{"availability": "http://schema.org/InStock"}]}}
    assert first_offer_availability(ld) == "http://schema.org/InStock"


def test_first_offer_availability_only_first_offer():
    ld = {
        "offers": [
            {"availability": "http://schema.org/OutOfStock"},
            {"availability": "http://schema.org/InStock"},
        ]
    }
    assert first_offer_availability(ld) == "http://schema.org/OutOfStock"


def test_first_offer_availability_single_offer():
    ld = {"offers": {"@type": "Offer", "availability": "https://schema.org/InStock"}}
    assert first_offer_availability(ld) == "https://schema.org/InStock"


def test_first_offer_availability_no_signal():
    assert first_offer_availability({"offers": {"@type": "AggregateOffer", "offers": []}}) is None
    assert first_offer_availability({"offers": {"@type": "Offer", "price": 10}}) is None


def test_first_offer_availability_without_offers():
    with pytest.raises(MalformedStructuredData):
        first_offer_availability({"@type": "Product", "name": "Yerba"})


def test_is_in_stock():
    assert is_in_stock("http://schema.org/InStock") is True
    assert is_in_stock("https://schema.org/InStock") is True
    assert is_in_stock("http://schema.org/OutOfStock") is False
    assert is_in_stock("https://schema.org/InStock", ("http://schema.org/InStock",)) is False
    assert is_in_stock(None) is None


def test_json_ld_image_variants():
    assert json_ld_image({"image": "https://x/a.jpg"}) == "https://x/a.jpg"
    assert json_ld_image({"image": ["https://x/b.jpg", "https://x/c.jpg"]}) == "https://x/b.jpg"
    assert json_ld_image({"image": {"@type": "ImageObject", "url": "https://x/d.jpg"}}) == "https://x/d.jpg"
    assert json_ld_image({}) is None


def test_get_canonical_url():
    doc = _doc('<link rel="stylesheet" href="/a.css"><link rel="canonical" href="https://www.carrefour.com.ar/x/p">')
    assert get_canonical_url(doc) == "https://www.carrefour.com.ar/x/p"
    assert get_canonical_url(_doc()) is None
