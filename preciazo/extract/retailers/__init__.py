"""Per-retailer extractors."""

from preciazo.extract.retailers.carrefour import CarrefourExtractor
from preciazo.extract.retailers.coto import CotoExtractor
from preciazo.extract.retailers.dia import DiaExtractor

__all__ = [
    "CarrefourExtractor",
    "CotoExtractor",
    "DiaExtractor",
]
