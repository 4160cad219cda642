"""
Pricing API - FastAPI router for pricing table management.
"""
from fastapi import APIRouter, Depends, HTTPException

from ..services.pricing_service import PricingService
from ..store.pricing_store import PricingTableNotFound
from .schemas import CartRequest, CartResponse, PricingTableModel
from .state import get_service

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.get("")
async def list_variants(service: PricingService = Depends(get_service)):
    """List variants with their active version."""
    variants = []
    for variant in service.store.variants():
        try:
            active_version = service.store.get_active(variant).version
        except PricingTableNotFound:
            active_version = None
        variants.append({
            "variant": variant,
            "active_version": active_version,
            "versions": len(service.store.list_tables(variant)),
        })
    return variants


@router.post("/cache/clear")
async def clear_cache(service: PricingService = Depends(get_service)):
    """Drop every cached pricing table."""
    service.clear_cache()
    return {"success": True}


@router.post("/calculate", response_model=CartResponse)
async def calculate_cart(req: CartRequest, service: PricingService = Depends(get_service)):
    """Quote every item of a cart against the active tables; any failure rejects the whole cart."""
    quote = service.quote_cart(
        [item.selection.to_selection() for item in req.items],
        submitted_unit_prices=[item.unit_price_cents for item in req.items],
    )
    return CartResponse(**quote.to_dict())


@router.get("/{variant}", response_model=PricingTableModel)
async def get_active_table(variant: str, service: PricingService = Depends(get_service)):
    """Get the active pricing table for a variant."""
    return PricingTableModel.from_table(service.get_active_table(variant))


@router.get("/{variant}/versions", response_model=list[PricingTableModel])
async def list_versions(variant: str, service: PricingService = Depends(get_service)):
    """List every stored version of a variant's table."""
    tables = service.store.list_tables(variant)
    if not tables:
        raise HTTPException(status_code=404, detail=f"No pricing tables for variant '{variant}'")
    return [PricingTableModel.from_table(t) for t in tables]


@router.post("", response_model=PricingTableModel, status_code=201)
async def publish_table(table: PricingTableModel, service: PricingService = Depends(get_service)):
    """Publish a new pricing table version and make it active."""
    return PricingTableModel.from_table(service.publish(table.to_table()))


@router.post("/{variant}/versions/{version}/activate", response_model=PricingTableModel)
async def activate_version(variant: str, version: str, service: PricingService = Depends(get_service)):
    """Make a stored version the variant's active table."""
    return PricingTableModel.from_table(service.activate(variant, version))
