"""Dia Online extractor using meta tags and JSON-LD offers."""

from selectolax.parser import HTMLParser

from preciazo.extract.base import BaseExtractor, Precioish
from preciazo.extract.toolkit import (
    first_offer_availability,
    get_meta_prop,
    get_product_json_ld,
    is_in_stock,
    json_ld_image,
    json_ld_text,
    price_from_meta,
)


class DiaExtractor(BaseExtractor):
    """Extract Dia product pages."""

    retailer = "dia"
    hosts = ("diaonline.supermercadosdia.com.ar",)
    parser_version = 1

    ean_property = "product:retailer_item_id"
    in_stock_sentinels = ("http://schema.org/InStock",)

    def extract_document(self, document: HTMLParser) -> Precioish:
        ean = self.require_ean(get_meta_prop(document, self.ean_property))
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
