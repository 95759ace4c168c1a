from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query

from app.api.schemas import (
    CatalogEntrySchema,
    CatalogResponseSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
)
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.utils.pricing import build_quote
from app.domain.entities.booking import OCCUPANCY_STATUSES, SelectedService
from app.wiring.dependencies import get_service_catalog


router = APIRouter()


@router.get("/api/catalog", response_model=CatalogResponseSchema)
def get_catalog(
    size: str = Query(""),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
) -> CatalogResponseSchema:
    return CatalogResponseSchema(
        size=size,
        services=[CatalogEntrySchema(name=e.name, price=e.price) for e in catalog.resolve(size)],
    )


@router.get("/api/catalog/sizes")
def get_sizes(catalog: ServiceCatalogPort = Depends(get_service_catalog)) -> dict[str, list[str]]:
    return {
        "sizes": catalog.size_categories(),
        "occupancy_statuses": list(OCCUPANCY_STATUSES),
    }


@router.post("/api/pricing/quote", response_model=QuoteResponseSchema)
def quote(req: QuoteRequestSchema) -> QuoteResponseSchema:
    result = build_quote(
        [SelectedService(name=s.name, price=s.price, count=s.count) for s in req.services]
    )
    return QuoteResponseSchema(
        subtotal=result.subtotal,
        discount_percent=result.tier.percent,
        range_min=result.tier.range_min,
        range_max=None if math.isinf(result.tier.range_max) else result.tier.range_max,
        discount_amount=result.discount_amount,
        total=result.total,
    )
