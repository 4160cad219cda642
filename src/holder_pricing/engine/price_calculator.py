"""
Price Calculator - composes a configured item's price from a pricing table.

Resolution order:
1. Validate quantity and that the table belongs to the selection's variant
2. Start from the variant's base price
3. Add one upcharge per priced color part
4. Add finish, arm type, module type and pattern type upcharges when selected
5. Add the custom fee, then extend by quantity

Every selected option must have a price. A missing entry raises
UnknownOptionValue instead of contributing 0.
"""
from typing import Optional

from .errors import (
    ConflictingOptionPrice,
    InvalidCustomFee,
    InvalidQuantity,
    UnknownOptionValue,
    VariantMismatch,
)
from .models import STRUCTURAL_CATEGORIES, PriceBreakdown, PricingTable, Selection


def _lookup(prices: dict[str, int], category: str, value: str) -> int:
    """Look up an upcharge, failing loudly when the option is not priced."""
    if value not in prices:
        raise UnknownOptionValue(category, value)
    return prices[value]


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)
    return quantity


def option_prices(selection: Selection, pricing_table: PricingTable) -> dict[str, int]:
    """
    Resolve the upcharge for every option the selection prices.

    Returns a dict keyed by color part name, 'finish', or structural
    category ('arm_type', 'module_type', 'pattern_type').
    """
    prices: dict[str, int] = {}

    def add(key: str, cents: int):
        if key in prices:
            raise ConflictingOptionPrice(key)
        prices[key] = cents

    # Color parts the table does not price are ignored
    for part, color in selection.colors.items():
        if part in pricing_table.color_prices:
            add(part, _lookup(pricing_table.color_prices[part], part, color))

    if selection.finish is not None:
        add('finish', _lookup(pricing_table.finish_prices, 'finish', selection.finish))

    for category, table_attr in STRUCTURAL_CATEGORIES.items():
        value: Optional[str] = getattr(selection, category)
        if value is not None:
            add(category, _lookup(getattr(pricing_table, table_attr), category, value))

    return prices


def compute_price(
    selection: Selection,
    pricing_table: PricingTable,
    custom_fee_cents: int = 0
) -> PriceBreakdown:
    """
    Compute the price breakdown for a selection.

    The caller is responsible for passing the active table for the
    selection's variant; no lookup happens here.

    Args:
        selection: Customer's option selection and quantity
        pricing_table: Pricing table for selection.variant
        custom_fee_cents: Flat per-unit adjustment from an admin override

    Returns:
        PriceBreakdown with unit price, subtotal and the table version

    Raises:
        InvalidQuantity, VariantMismatch, UnknownOptionValue, InvalidCustomFee,
        ConflictingOptionPrice
    """
    quantity = _validate_quantity(selection.quantity)

    if selection.variant != pricing_table.variant:
        raise VariantMismatch(selection.variant, pricing_table.variant)

    if isinstance(custom_fee_cents, bool) or not isinstance(custom_fee_cents, int):
        raise InvalidCustomFee(custom_fee_cents, "must be integer cents")

    base = pricing_table.base_price_cents
    options = option_prices(selection, pricing_table)

    unit_price = base + sum(options.values()) + custom_fee_cents
    if unit_price < 0:
        raise InvalidCustomFee(custom_fee_cents, f"unit price would be {unit_price} cents")

    return PriceBreakdown(
        base_price_cents=base,
        option_prices_cents=options,
        custom_fee_cents=custom_fee_cents,
        unit_price_cents=unit_price,
        quantity=quantity,
        subtotal_cents=unit_price * quantity,
        pricing_version=pricing_table.version,
    )
