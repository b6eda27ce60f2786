"""Append-only observation store over an async SQLAlchemy session factory."""

import logging
from typing import Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from preciazo.db.models import Precio
from preciazo.normalize.processor import Observation

logger = logging.getLogger(__name__)


class ObservationStore:
    """
    Persist and read price observations keyed by EAN.

    Every call opens its own session, so writers for different EANs never
    share a transaction and readers see committed rows only. Rows are never
    updated or deleted; ordering is resolved at read time by
    ``(fetched_at, id)``.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        if session_factory is None:
            from preciazo.db.session import AsyncSessionLocal

            session_factory = AsyncSessionLocal
        self._session_factory = session_factory

    async def append(self, observation: Observation) -> Precio:
        """
        Insert one immutable observation row.

        Args:
            observation: Validated observation

        Returns:
            The persisted row with its assigned identity
        """
        row = Precio(
            ean=observation.ean,
            fetched_at=observation.fetched_at,
            precio_centavos=observation.precio_centavos,
            in_stock=observation.in_stock,
            url=observation.url,
            name=observation.name,
            image_url=observation.image_url,
            parser_version=observation.parser_version,
        )
        async with self._session_factory() as session:
            async with session.begin():
                session.add(row)
        logger.debug(f"Appended observation {row.id} for {row.ean}")
        return row

    async def history_for(self, ean: str) -> list[Precio]:
        """Return every observation for an EAN, oldest first (empty if unknown)."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Precio)
                .where(Precio.ean == ean)
                .order_by(Precio.fetched_at.asc(), Precio.id.asc())
            )
            return list(result.scalars().all())

    async def latest_metadata(self, ean: str) -> Optional[Precio]:
        """Return the most recent observation for an EAN that carries a name."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Precio)
                .where(Precio.ean == ean, Precio.name.is_not(None), Precio.name != "")
                .order_by(Precio.fetched_at.desc(), Precio.id.desc())
                .limit(1)
            )
            return result.scalars().first()

    async def approximate_count(self) -> int:
        """
        Return an approximate number of stored observations.

        PostgreSQL answers from planner statistics (``pg_class.reltuples``),
        which may lag behind recent writes. Other engines read the highest
        identity from the primary key index. Neither scans the table.
        """
        async with self._session_factory() as session:
            dialect = session.get_bind().dialect.name
            if dialect == "postgresql":
                result = await session.execute(
                    text(
                        "SELECT reltuples::bigint FROM pg_catalog.pg_class "
                        "WHERE relname = :table"
                    ),
                    {"table": Precio.__tablename__},
                )
                estimate = result.scalar()
                # reltuples is -1 until the table has been analyzed
                if estimate is not None and estimate >= 0:
                    return int(estimate)

            result = await session.execute(select(func.max(Precio.id)))
            return int(result.scalar() or 0)
