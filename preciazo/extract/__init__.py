"""Extraction of canonical price observations from product pages."""

from preciazo.extract.base import BaseExtractor, Precioish
from preciazo.extract.errors import (
    ExtractionError,
    MalformedStructuredData,
    MissingIdentifier,
    PriceParseError,
    UnknownRetailer,
)

__all__ = [
    "BaseExtractor",
    "Precioish",
    "ExtractionError",
    "MalformedStructuredData",
    "MissingIdentifier",
    "PriceParseError",
    "UnknownRetailer",
]
