"""Product history routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from preciazo.api.deps import get_history_service
from preciazo.query.service import HistoryService, NotFound

router = APIRouter(prefix="/api/ean", tags=["products"])


class PrecioResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ean: str
    fetched_at: datetime
    precio_centavos: int | None
    in_stock: bool | None
    url: str | None
    name: str | None
    image_url: str | None
    parser_version: int | None


class ProductHistoryResponse(BaseModel):
    ean: str
    precios: list[PrecioResponse]
    meta: PrecioResponse | None


@router.get("/{ean}", response_model=ProductHistoryResponse)
async def get_product_history(
    ean: str,
    service: HistoryService = Depends(get_history_service),
):
    """Full price history of a product plus its latest known metadata."""
    try:
        history = await service.get_product(ean)
    except NotFound:
        raise HTTPException(status_code=404, detail="Not Found")

    return ProductHistoryResponse(
        ean=history.ean,
        precios=[PrecioResponse.model_validate(row) for row in history.observations],
        meta=PrecioResponse.model_validate(history.meta) if history.meta else None,
    )
