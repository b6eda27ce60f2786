"""Extraction error taxonomy."""

from typing import Optional


class ExtractionError(Exception):
    """Base class for errors raised while extracting a product page."""

    def __init__(self, message: str, retailer: Optional[str] = None):
        super().__init__(message)
        self.retailer = retailer


class MissingIdentifier(ExtractionError):
    """The page does not carry the product EAN."""


class MalformedStructuredData(ExtractionError):
    """Embedded JSON-LD is missing, unparseable or lacks the expected shape."""


class PriceParseError(ExtractionError):
    """A price field is present but is not a valid decimal amount."""


class UnknownRetailer(LookupError):
    """No extractor is registered for a retailer key or host."""
