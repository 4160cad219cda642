"""
Orders API - prices and records order items.
"""
from fastapi import APIRouter, Depends

from ..orders.order_ledger import OrderItem, OrderItemNotFound, OrderLedger
from ..services.pricing_service import PricingService
from .schemas import AuditFindingResponse, OrderItemCreate, OrderItemResponse, OrderResponse
from .state import get_ledger, get_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _item_response(item: OrderItem) -> OrderItemResponse:
    return OrderItemResponse(**item.to_dict())


@router.get("/audit", response_model=list[AuditFindingResponse])
async def audit_orders(ledger: OrderLedger = Depends(get_ledger)):
    """Report stored order items whose amounts do not add up."""
    return [AuditFindingResponse(**f.__dict__) for f in ledger.audit()]


@router.post("/{order_id}/items", response_model=OrderItemResponse, status_code=201)
async def create_order_item(
    order_id: str,
    body: OrderItemCreate,
    service: PricingService = Depends(get_service),
    ledger: OrderLedger = Depends(get_ledger),
):
    """Price an item against the active table and record it on the order."""
    selection = body.selection.to_selection()
    breakdown = service.quote(selection, custom_fee_cents=body.custom_fee_cents)
    item = ledger.record_item(order_id, body.line_id, selection, breakdown)
    return _item_response(item)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, ledger: OrderLedger = Depends(get_ledger)):
    """Get an order's recorded items and total."""
    items = ledger.list_items(order_id)
    if not items:
        raise OrderItemNotFound(order_id)
    return OrderResponse(
        order_id=order_id,
        items=[_item_response(i) for i in items],
        total_cents=sum(i.subtotal_cents for i in items),
    )
