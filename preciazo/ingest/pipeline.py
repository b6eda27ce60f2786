"""Run one fetched page through extraction, validation and persistence."""

import logging
from datetime import datetime
from typing import Optional, Type, Union

from preciazo.db.models import Precio
from preciazo.db.store import ObservationStore
from preciazo.extract.base import Precioish
from preciazo.extract.errors import ExtractionError, UnknownRetailer
from preciazo.extract.registry import ExtractorRegistry
from preciazo.ingest.debug_bundle import DebugBundleWriter
from preciazo.logging_config import get_logger
from preciazo.metrics import (
    extraction_errors_total,
    observations_appended_total,
    record_extraction,
)
from preciazo.normalize.processor import InvalidRecord, RecordNormalizer

logger = logging.getLogger(__name__)


class IngestPipeline:
    """
    Glue between the fetcher and the store.

    Extraction is all-or-nothing per page: an error aborts before anything
    is written. Errors are logged, counted and re-raised to the caller; no
    retry happens here.
    """

    def __init__(
        self,
        store: ObservationStore,
        registry: Type[ExtractorRegistry] = ExtractorRegistry,
        normalizer: Optional[RecordNormalizer] = None,
        debug_writer: Optional[DebugBundleWriter] = None,
    ):
        self.store = store
        self.registry = registry
        self.normalizer = normalizer or RecordNormalizer()
        self.debug_writer = debug_writer or DebugBundleWriter()

    def resolve_retailer(self, retailer: Optional[str], url: Optional[str]) -> str:
        """Pick the retailer key from an explicit value or the page URL."""
        if retailer:
            return retailer
        if url:
            return self.registry.retailer_for_url(url)
        raise UnknownRetailer("Either a retailer or a url is required")

    def extract_page(
        self,
        html: Union[str, bytes],
        retailer: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Precioish:
        """
        Extract the canonical record from one page.

        Raises:
            UnknownRetailer: If the retailer cannot be resolved
            ExtractionError: If the page does not yield a record
        """
        retailer = self.resolve_retailer(retailer, url)
        extractor = self.registry.get_extractor(retailer)
        log = get_logger(__name__, retailer=retailer, url=url)

        try:
            record = extractor.extract(html)
        except ExtractionError as e:
            e.retailer = e.retailer or retailer
            record_extraction(retailer, success=False, error_type=type(e).__name__)
            log.warning(f"Extraction failed for {retailer} page {url or '<no url>'}: {type(e).__name__}: {e}")
            self._dump(retailer, html, e, url)
            raise

        record_extraction(retailer, success=True)
        log.debug(f"Extracted {record.ean} from {url or '<no url>'}")
        return record

    async def ingest_page(
        self,
        html: Union[str, bytes],
        fetched_at: datetime,
        retailer: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Precio:
        """
        Extract, validate and append one observation.

        Raises:
            ExtractionError: If the page does not yield a record
            InvalidRecord: If the record violates a persistence invariant
        """
        retailer = self.resolve_retailer(retailer, url)
        record = self.extract_page(html, retailer=retailer, url=url)

        try:
            observation = self.normalizer.normalize(record, fetched_at=fetched_at, url=url)
        except InvalidRecord as e:
            extraction_errors_total.labels(retailer=retailer, error_type=type(e).__name__).inc()
            logger.warning(f"Rejected record from {retailer} page {url or '<no url>'}: {e}")
            raise

        row = await self.store.append(observation)
        observations_appended_total.labels(retailer=retailer).inc()
        return row

    def _dump(self, retailer: str, html: Union[str, bytes], error: Exception, url: Optional[str]) -> None:
        try:
            path = self.debug_writer.write_bundle(retailer, html, error, url=url)
        except OSError:
            logger.exception(f"Could not write debug bundle for {retailer}")
            return
        if path is not None:
            logger.info(f"Saved failing page for {retailer} at {path}")
