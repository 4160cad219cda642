import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from holder_pricing import __version__
from holder_pricing.engine import PricingError
from holder_pricing.store import (
    DuplicatePricingVersion,
    InvalidPricingTable,
    PricingTableNotFound,
)
from holder_pricing.orders.order_ledger import DuplicateOrderItem, OrderItemNotFound
from holder_pricing.services.pricing_service import PricingService
from holder_pricing.api.pricing_api import router as pricing_router
from holder_pricing.api.orders_api import router as orders_router
from holder_pricing.api.schemas import BreakdownResponse, PriceRequest
from holder_pricing.api.state import get_service, settings

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Holder Pricing API",
    description="Pricing and order-line backend for configurable glass and bottle holders",
    version=__version__
)

# Enable CORS for the configurator frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pricing_router)
app.include_router(orders_router)


def _error_body(error: Exception, details: Optional[dict] = None) -> dict:
    return {
        "error": error.__class__.__name__,
        "message": str(error),
        "details": details or {},
    }


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    logger.info("Rejected pricing request %s: %r", request.url.path, exc)
    return JSONResponse(status_code=400, content=_error_body(exc, exc.details))


@app.exception_handler(InvalidPricingTable)
async def invalid_table_handler(request: Request, exc: InvalidPricingTable):
    return JSONResponse(status_code=400, content=_error_body(exc, {"errors": exc.errors}))


@app.exception_handler(PricingTableNotFound)
@app.exception_handler(OrderItemNotFound)
async def not_found_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=404, content=_error_body(exc))


@app.exception_handler(DuplicatePricingVersion)
@app.exception_handler(DuplicateOrderItem)
async def conflict_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=409, content=_error_body(exc))


@app.get("/")
async def root():
    return {"status": "online", "message": "Holder Pricing API Active"}


@app.post("/price", response_model=BreakdownResponse)
async def price_selection(req: PriceRequest, service: PricingService = Depends(get_service)):
    """Price a selection against its variant's active table."""
    breakdown = service.quote(req.selection.to_selection(), custom_fee_cents=req.custom_fee_cents)
    return BreakdownResponse(**breakdown.to_dict())


@app.get("/system/status")
async def get_status(service: PricingService = Depends(get_service)):
    return {
        "engine_active": True,
        "variants": service.store.variants(),
        "cache_enabled": service.cache is not None,
        "cached_tables": len(service.cache) if service.cache is not None else 0,
    }
