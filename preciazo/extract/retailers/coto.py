"""Coto Digital extractor working from rendered page text."""

import re
from typing import Optional

from selectolax.parser import HTMLParser

from preciazo.extract.base import BaseExtractor, Precioish
from preciazo.extract.toolkit import node_text, price_from_text

EAN_PATTERN = re.compile(r"\b(\d{8,14})\b")


class CotoExtractor(BaseExtractor):
    """Extract Coto product pages, which carry no JSON-LD."""

    retailer = "coto"
    hosts = ("www.cotodigital3.com.ar", "cotodigital3.com.ar")
    parser_version = 1

    price_selector = ".atg_store_newPrice"
    unavailable_selector = ".product_not_available"
    title_selector = "h1.product_page"
    image_selector = ".zoom img"

    def extract_document(self, document: HTMLParser) -> Precioish:
        ean = self.require_ean(self._ean_from_brand_text(document))

        price_text = node_text(document, self.price_selector)
        precio_centavos = price_from_text(price_text) if price_text else None

        in_stock = document.css_first(self.unavailable_selector) is None

        image = document.css_first(self.image_selector)
        image_url = image.attributes.get("src") if image is not None else None

        return Precioish(
            ean=ean,
            precio_centavos=precio_centavos,
            in_stock=in_stock,
            name=node_text(document, self.title_selector),
            image_url=image_url or None,
            parser_version=self.parser_version,
        )

    @staticmethod
    def _ean_from_brand_text(document: HTMLParser) -> Optional[str]:
        # The EAN is rendered as "... | EAN: 7790001000012" inside #brandText
        for node in document.css("div#brandText"):
            text = node.text(separator=" ")
            if "EAN:" not in text:
                continue
            match = EAN_PATTERN.search(text.split("EAN:", 1)[1])
            if match:
                return match.group(1)
        return None
