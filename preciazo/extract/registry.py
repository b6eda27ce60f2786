"""Extractor registry for retailer implementations."""

import logging
from typing import Type
from urllib.parse import urlparse

from preciazo.extract.base import BaseExtractor
from preciazo.extract.errors import UnknownRetailer
from preciazo.extract.retailers import CarrefourExtractor, CotoExtractor, DiaExtractor

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Registry for retailer extractors."""

    _extractors: dict[str, Type[BaseExtractor]] = {
        "dia": DiaExtractor,
        "carrefour": CarrefourExtractor,
        "coto": CotoExtractor,
    }

    _instances: dict[str, BaseExtractor] = {}

    @classmethod
    def get_extractor(cls, retailer: str) -> BaseExtractor:
        """
        Get or create the extractor instance for a retailer.

        Args:
            retailer: Retailer identifier

        Returns:
            Extractor instance

        Raises:
            UnknownRetailer: If retailer is not registered
        """
        if retailer not in cls._extractors:
            raise UnknownRetailer(
                f"Unknown retailer: {retailer}. Available: {list(cls._extractors.keys())}"
            )

        # Lazy initialization
        if retailer not in cls._instances:
            cls._instances[retailer] = cls._extractors[retailer]()
            logger.info(f"Initialized extractor for retailer: {retailer}")

        return cls._instances[retailer]

    @classmethod
    def register_extractor(cls, retailer: str, extractor_class: Type[BaseExtractor]) -> None:
        """
        Register a new extractor class.

        Args:
            retailer: Retailer identifier
            extractor_class: Extractor class to register
        """
        cls._extractors[retailer] = extractor_class
        cls._instances.pop(retailer, None)
        logger.info(f"Registered extractor for retailer: {retailer}")

    @classmethod
    def list_retailers(cls) -> list[str]:
        """List all registered retailer identifiers."""
        return list(cls._extractors.keys())

    @classmethod
    def retailer_for_url(cls, url: str) -> str:
        """
        Resolve the retailer that serves a product URL.

        Raises:
            UnknownRetailer: If no registered extractor claims the host
        """
        host = (urlparse(url).hostname or "").lower()
        for retailer, extractor_class in cls._extractors.items():
            if host in extractor_class.hosts:
                return retailer
        raise UnknownRetailer(f"Unknown host {host!r} for url {url}")


def retailer_for_url(url: str) -> str:
    """Module-level shortcut for ``ExtractorRegistry.retailer_for_url``."""
    return ExtractorRegistry.retailer_for_url(url)
