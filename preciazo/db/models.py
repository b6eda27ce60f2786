"""SQLAlchemy database models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Precio(Base):
    """One price observation of a product at one fetch time.

    Rows are append-only; history for an EAN is ordered by ``fetched_at``
    with ``id`` as the tiebreak.
    """

    __tablename__ = "precios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ean: Mapped[str] = mapped_column(String(32), nullable=False)
    fetched_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    precio_centavos: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    in_stock: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parser_version: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("ix_precios_ean_fetched_at", "ean", "fetched_at", "id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Precio id={self.id} ean={self.ean} fetched_at={self.fetched_at} "
            f"precio_centavos={self.precio_centavos}>"
        )
