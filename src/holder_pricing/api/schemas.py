"""
Pydantic request/response models for the API.
"""
from typing import Optional

from pydantic import BaseModel, Field, StrictInt

from ..engine.models import PricingTable, Selection


class SelectionModel(BaseModel):
    """A configured item selection."""
    variant: str
    colors: dict[str, str] = Field(default_factory=dict)
    finish: Optional[str] = None
    arm_type: Optional[str] = None
    module_type: Optional[str] = None
    pattern_type: Optional[str] = None
    quantity: StrictInt = 1

    def to_selection(self) -> Selection:
        return Selection.from_dict(self.model_dump())


class PriceRequest(BaseModel):
    """Request model for pricing a selection."""
    selection: SelectionModel
    custom_fee_cents: StrictInt = 0


class PricingTableModel(BaseModel):
    """Request/response model for a pricing table."""
    variant: str
    version: str
    base_price_cents: StrictInt
    color_prices: dict[str, dict[str, StrictInt]] = Field(default_factory=dict)
    finish_prices: dict[str, StrictInt] = Field(default_factory=dict)
    arm_prices: dict[str, StrictInt] = Field(default_factory=dict)
    module_prices: dict[str, StrictInt] = Field(default_factory=dict)
    pattern_prices: dict[str, StrictInt] = Field(default_factory=dict)
    active: bool = False
    created_at: Optional[str] = None

    def to_table(self) -> PricingTable:
        return PricingTable.from_dict(self.model_dump())

    @classmethod
    def from_table(cls, table: PricingTable) -> 'PricingTableModel':
        return cls(**table.to_dict())


class BreakdownResponse(BaseModel):
    """Response model for a price breakdown."""
    pricing_version: str
    base_price_cents: int
    option_prices_cents: dict[str, int]
    custom_fee_cents: int
    unit_price_cents: int
    quantity: int
    subtotal_cents: int


class CartItemModel(BaseModel):
    """One cart item, with the unit price the client displayed if it has one."""
    selection: SelectionModel
    unit_price_cents: Optional[StrictInt] = None


class CartRequest(BaseModel):
    """Request model for quoting a whole cart."""
    items: list[CartItemModel]


class CartResponse(BaseModel):
    """Response model for a cart quote."""
    items: list[BreakdownResponse]
    item_count: int
    subtotal_cents: int


class OrderItemCreate(BaseModel):
    """Request model for pricing and recording an order item."""
    line_id: str
    selection: SelectionModel
    custom_fee_cents: StrictInt = 0


class OrderItemResponse(BaseModel):
    """Response model for a recorded order item."""
    order_id: str
    line_id: str
    selection: SelectionModel
    breakdown: BreakdownResponse
    subtotal_cents: int
    recorded_at: str


class OrderResponse(BaseModel):
    """Response model for an order's items and total."""
    order_id: str
    items: list[OrderItemResponse]
    total_cents: int


class AuditFindingResponse(BaseModel):
    order_id: str
    line_id: str
    problem: str
