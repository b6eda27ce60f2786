"""Validate extracted records and stamp fetch metadata before persistence."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from preciazo.extract.base import Precioish

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    """Validated observation ready to be appended to the store."""

    ean: str
    fetched_at: datetime
    precio_centavos: Optional[int]
    in_stock: Optional[bool]
    url: Optional[str] = None
    name: Optional[str] = None
    image_url: Optional[str] = None
    parser_version: Optional[int] = None


class InvalidRecord(Exception):
    """Raised when an extracted record violates a persistence invariant."""

    pass


class RecordNormalizer:
    """Normalize and validate extracted records."""

    def normalize(
        self,
        record: Precioish,
        fetched_at: Optional[datetime],
        url: Optional[str] = None,
    ) -> Observation:
        """
        Validate an extracted record and stamp it with fetch metadata.

        Args:
            record: Extractor output
            fetched_at: Time the page was fetched, supplied by the fetcher
            url: Source URL of the page

        Returns:
            Observation object

        Raises:
            InvalidRecord: If the record cannot be persisted
        """
        ean = (record.ean or "").strip()
        if not ean:
            raise InvalidRecord("Record has no EAN")

        precio = record.precio_centavos
        if precio is not None:
            if isinstance(precio, bool) or not isinstance(precio, int):
                raise InvalidRecord(f"Non-integer price {precio!r} for {ean}")
            if precio < 0:
                raise InvalidRecord(f"Negative price {precio} for {ean}")

        if fetched_at is None:
            raise InvalidRecord(f"No fetch timestamp for {ean}")

        return Observation(
            ean=ean,
            fetched_at=self._to_naive_utc(fetched_at),
            precio_centavos=precio,
            in_stock=record.in_stock,
            url=(url or "").strip() or None,
            name=(record.name or "").strip() or None,
            image_url=record.image_url or None,
            parser_version=record.parser_version,
        )

    @staticmethod
    def _to_naive_utc(value: datetime) -> datetime:
        # Timestamps are stored without zone, always in UTC
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
