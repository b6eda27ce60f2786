"""Base extractor interface for retailer product pages."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Optional, Union

from selectolax.parser import HTMLParser

from preciazo.extract.errors import MissingIdentifier
from preciazo.extract.toolkit import parse_document


@dataclass
class Precioish:
    """Canonical observation extracted from one product page."""

    ean: str
    precio_centavos: Optional[int] = None
    in_stock: Optional[bool] = None
    name: Optional[str] = None
    image_url: Optional[str] = None
    parser_version: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


class BaseExtractor(ABC):
    """Abstract base class for retailer extractors.

    Subclasses read one retailer's markup and return a ``Precioish``.
    Extractors hold no per-call state, so a single instance is shared by
    every caller.
    """

    retailer: str = "generic"
    hosts: tuple[str, ...] = ()
    parser_version: int = 1

    def extract(self, html: Union[str, bytes]) -> Precioish:
        """
        Extract the canonical observation from raw page content.

        Args:
            html: Raw HTML of one product page (text or bytes)

        Returns:
            Precioish with the fields this retailer exposes

        Raises:
            ExtractionError: If the page lacks required data
        """
        document = parse_document(html)
        return self.extract_document(document)

    @abstractmethod
    def extract_document(self, document: HTMLParser) -> Precioish:
        """Extract the observation from an already parsed document."""
        pass

    def require_ean(self, ean: Optional[str]) -> str:
        """Return the stripped EAN or raise ``MissingIdentifier``."""
        if ean is None or not ean.strip():
            raise MissingIdentifier("no EAN found", retailer=self.retailer)
        return ean.strip()
