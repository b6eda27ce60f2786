"""Read-side queries for product price history."""

import logging
from dataclasses import dataclass
from typing import Optional

from preciazo.db.models import Precio
from preciazo.db.store import ObservationStore

logger = logging.getLogger(__name__)


class NotFound(Exception):
    """Raised when an EAN has no observation history."""

    def __init__(self, ean: str):
        super().__init__(f"No observations for EAN {ean}")
        self.ean = ean


@dataclass
class ProductHistory:
    """Full history of one product plus its best-known metadata row."""

    ean: str
    observations: list[Precio]
    meta: Optional[Precio]


class HistoryService:
    """Answer history and metadata queries on top of the observation store."""

    def __init__(self, store: ObservationStore):
        self.store = store

    async def get_product(self, ean: str) -> ProductHistory:
        """
        Return the ordered history and latest metadata for an EAN.

        Raises:
            NotFound: If the EAN has never been observed
        """
        observations = await self.store.history_for(ean)
        if not observations:
            raise NotFound(ean)

        meta = await self.store.latest_metadata(ean)
        return ProductHistory(ean=ean, observations=observations, meta=meta)

    async def count_observations(self) -> int:
        """Approximate number of observations across all products."""
        return await self.store.approximate_count()
