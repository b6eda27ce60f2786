"""Retailer-agnostic helpers for reading product data out of HTML pages."""

import json
import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional, Union

from selectolax.parser import HTMLParser

from preciazo.extract.errors import MalformedStructuredData, PriceParseError

logger = logging.getLogger(__name__)

PRICE_META_PROPERTY = "product:price:amount"

SCHEMA_IN_STOCK = (
    "http://schema.org/InStock",
    "https://schema.org/InStock",
)

_PRICE_TOKEN = re.compile(r"\d[\d.,]*")


def parse_document(html: Union[str, bytes]) -> HTMLParser:
    """Parse raw page content into a navigable tree.

    The parser is lenient: broken or partial markup still yields a tree.
    Byte input is decoded using the page's declared charset.
    """
    if isinstance(html, (bytes, bytearray)):
        return HTMLParser(bytes(html), detect_encoding=True, use_meta_tags=True)
    return HTMLParser(html)


def get_meta_prop(document: HTMLParser, property_name: str) -> Optional[str]:
    """
    Read the content of a meta tag by its ``property`` or ``name`` attribute.

    Tags with empty content are skipped. Returns None when no matching tag
    carries a value.
    """
    for node in document.css("meta"):
        attrs = node.attributes
        if attrs.get("property") == property_name or attrs.get("name") == property_name:
            content = (attrs.get("content") or "").strip()
            if content:
                return content
    return None


def _is_product(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    obj_type = obj.get("@type", "")
    if isinstance(obj_type, list):
        return "Product" in obj_type
    return obj_type == "Product"


def _candidates(data: Any) -> Iterable[Dict[str, Any]]:
    """Yield every object in a JSON-LD payload that may describe a product."""
    if isinstance(data, list):
        for item in data:
            yield from _candidates(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            for item in graph:
                yield from _candidates(item)


def get_product_json_ld(document: HTMLParser) -> Dict[str, Any]:
    """
    Locate and parse the JSON-LD block describing a Product.

    Raises:
        MalformedStructuredData: If there is no JSON-LD block, a block is not
            valid JSON, or no block describes a Product
    """
    scripts = document.css('script[type="application/ld+json"]')
    if not scripts:
        raise MalformedStructuredData("no JSON-LD block found")

    decode_error: Optional[json.JSONDecodeError] = None
    for script in scripts:
        try:
            data = json.loads(script.text())
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping unparseable JSON-LD block: {e}")
            decode_error = decode_error or e
            continue
        for candidate in _candidates(data):
            if _is_product(candidate):
                return candidate

    if decode_error is not None:
        raise MalformedStructuredData(f"invalid JSON-LD block: {decode_error}")
    raise MalformedStructuredData("no Product in JSON-LD blocks")


def _to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price_from_meta(
    document: HTMLParser, property_name: str = PRICE_META_PROPERTY
) -> Optional[int]:
    """
    Read a decimal price meta tag and convert it to minor currency units.

    Returns None when the page declares no price.

    Raises:
        PriceParseError: If the meta value is not a non-negative decimal
    """
    raw = get_meta_prop(document, property_name)
    if raw is None:
        return None

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise PriceParseError(f"invalid price {raw!r} in meta {property_name}")

    if not amount.is_finite() or amount < 0:
        raise PriceParseError(f"invalid price {raw!r} in meta {property_name}")

    return _to_minor_units(amount)


def price_from_text(text: Optional[str]) -> int:
    """
    Parse a displayed price such as ``"$1.234,56"`` into minor units.

    When both separators appear the rightmost one is the decimal mark. A
    lone separator followed by exactly three digits groups thousands.

    Raises:
        PriceParseError: If the text holds no readable amount
    """
    match = _PRICE_TOKEN.search(text or "")
    if not match:
        raise PriceParseError(f"no price in {text!r}")

    token = match.group(0).rstrip(".,")
    last_dot = token.rfind(".")
    last_comma = token.rfind(",")

    if last_dot >= 0 and last_comma >= 0:
        decimal_mark = "." if last_dot > last_comma else ","
    elif last_dot >= 0 or last_comma >= 0:
        sep = "." if last_dot >= 0 else ","
        fraction = token.rpartition(sep)[2]
        if token.count(sep) > 1 or len(fraction) == 3:
            decimal_mark = None
        else:
            decimal_mark = sep
    else:
        decimal_mark = None

    if decimal_mark is None:
        normalized = token.replace(".", "").replace(",", "")
    else:
        thousands = "," if decimal_mark == "." else "."
        normalized = token.replace(thousands, "").replace(decimal_mark, ".")

    try:
        amount = Decimal(normalized)
    except InvalidOperation:
        raise PriceParseError(f"no price in {text!r}")

    return _to_minor_units(amount)


def first_offer_availability(json_ld: Dict[str, Any]) -> Optional[str]:
    """
    Return the ``availability`` of the first offer in a Product block.

    Handles an AggregateOffer wrapping an ``offers`` list, a bare list of
    offers, and a single Offer. Later offers are ignored.

    Raises:
        MalformedStructuredData: If the block carries no ``offers``
    """
    offers = json_ld.get("offers")
    if offers is None:
        raise MalformedStructuredData("JSON-LD Product has no offers")

    if isinstance(offers, dict) and "offers" in offers:
        offers = offers["offers"]

    if isinstance(offers, list):
        if not offers:
            return None
        offer = offers[0]
    elif isinstance(offers, dict):
        offer = offers
    else:
        raise MalformedStructuredData(f"unexpected offers value: {offers!r}")

    if not isinstance(offer, dict):
        raise MalformedStructuredData(f"unexpected offer value: {offer!r}")

    availability = offer.get("availability")
    if availability is None:
        return None
    return str(availability).strip()


def is_in_stock(
    availability: Optional[str], sentinels: Iterable[str] = SCHEMA_IN_STOCK
) -> Optional[bool]:
    """Compare an availability value against a retailer's in-stock sentinels."""
    if availability is None:
        return None
    return availability in tuple(sentinels)


def json_ld_image(json_ld: Dict[str, Any]) -> Optional[str]:
    """Return the first image URL declared in a Product block."""
    image = json_ld.get("image")
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")
    if isinstance(image, str) and image.strip():
        return image.strip()
    return None


def json_ld_text(json_ld: Dict[str, Any], key: str) -> Optional[str]:
    """Return a stripped string field from a JSON-LD object, or None."""
    value = json_ld.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def node_text(document: HTMLParser, selector: str) -> Optional[str]:
    """Return the stripped text of the first node matching ``selector``."""
    node = document.css_first(selector)
    if node is None:
        return None
    text = node.text(strip=True)
    return text or None



def get_canonical_url(document: HTMLParser) -> Optional[str]:
    """Return the page's ``<link rel="canonical">`` href, if any."""
    for node in document.css("link"):
        rel = (node.attributes.get("rel") or "").lower().split()
        href = node.attributes.get("href")
        if "canonical" in rel and href:
            return href.strip()
    return None
