"""Carrefour extractor reading the EAN from the specification table."""

from typing import Optional

from selectolax.parser import HTMLParser

from preciazo.extract.base import BaseExtractor, Precioish
from preciazo.extract.toolkit import (
    SCHEMA_IN_STOCK,
    first_offer_availability,
    get_product_json_ld,
    is_in_stock,
    json_ld_image,
    json_ld_text,
    price_from_meta,
)


class CarrefourExtractor(BaseExtractor):
    """Extract Carrefour product pages."""

    retailer = "carrefour"
    hosts = ("www.carrefour.com.ar", "carrefour.com.ar")
    parser_version = 1

    in_stock_sentinels = SCHEMA_IN_STOCK

    def extract_document(self, document: HTMLParser) -> Precioish:
        ean = self.require_ean(self._ean_from_specification(document))
        precio_centavos = price_from_meta(document)

        ld = get_product_json_ld(document)
        in_stock = is_in_stock(first_offer_availability(ld), self.in_stock_sentinels)

        return Precioish(
            ean=ean,
            precio_centavos=precio_centavos,
            in_stock=in_stock,
            name=json_ld_text(ld, "name"),
            image_url=json_ld_image(ld),
            parser_version=self.parser_version,
        )

    @staticmethod
    def _ean_from_specification(document: HTMLParser) -> Optional[str]:
        """Read the value cell next to the ``EAN`` specification label."""
        label = document.css_first('td[data-specification="EAN"]')
        if label is None:
            return None
        value = label.next
        while value is not None and value.tag != "td":
            value = value.next
        if value is None:
            return None
        return value.text(strip=True)
