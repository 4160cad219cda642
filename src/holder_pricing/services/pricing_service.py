"""
Pricing Service - joins the pricing store and the price calculator.

Reads go through an optional injected cache. Writes go to the store and
then invalidate the affected variant in the cache.
"""
import logging
from typing import Optional, Sequence

from ..engine import (
    CartQuote,
    EmptyCart,
    PriceBreakdown,
    PriceMismatch,
    PricingTable,
    Selection,
    compute_price,
)
from ..store.cache import PricingTableCache
from ..store.pricing_store import PricingStore

logger = logging.getLogger(__name__)


class PricingService:
    """Service for quoting configured items and managing pricing tables."""

    def __init__(self, store: PricingStore, cache: Optional[PricingTableCache] = None):
        self.store = store
        self.cache = cache

    def get_active_table(self, variant: str) -> PricingTable:
        """Get the active table for a variant, through the cache when configured."""
        if self.cache is None:
            return self.store.get_active(variant)
        return self.cache.get(variant, self.store.get_active)

    def quote(self, selection: Selection, custom_fee_cents: int = 0) -> PriceBreakdown:
        """Price a selection against its variant's active table."""
        table = self.get_active_table(selection.variant)
        return compute_price(selection, table, custom_fee_cents=custom_fee_cents)

    def quote_cart(
        self,
        selections: Sequence[Selection],
        submitted_unit_prices: Optional[Sequence[Optional[int]]] = None
    ) -> CartQuote:
        """
        Price every item of a cart, or none of them.

        Each variant's active table is fetched once, so all items of one
        variant are priced against the same version. When the client sends
        the unit prices it displayed, any that differ from the server price
        raise PriceMismatch; None entries are not checked.

        Raises:
            EmptyCart, PriceMismatch, PricingTableNotFound, or the first
            PricingError from compute_price
        """
        if not selections:
            raise EmptyCart()
        if submitted_unit_prices is not None and len(submitted_unit_prices) != len(selections):
            raise ValueError("submitted_unit_prices must have one entry per selection")

        tables: dict[str, PricingTable] = {}
        breakdowns = []
        for index, selection in enumerate(selections):
            if selection.variant not in tables:
                tables[selection.variant] = self.get_active_table(selection.variant)
            breakdown = compute_price(selection, tables[selection.variant])

            if submitted_unit_prices is not None:
                submitted = submitted_unit_prices[index]
                if submitted is not None and submitted != breakdown.unit_price_cents:
                    raise PriceMismatch(index, breakdown.unit_price_cents, submitted)
            breakdowns.append(breakdown)

        subtotal = sum(b.subtotal_cents for b in breakdowns)
        logger.info("Quoted cart of %d items: %d cents", len(breakdowns), subtotal)
        return CartQuote(items=breakdowns, subtotal_cents=subtotal)

    def publish(self, table: PricingTable) -> PricingTable:
        """Publish a new table version and make it active."""
        published = self.store.publish(table)
        self._invalidate(published.variant)
        return published

    def activate(self, variant: str, version: str) -> PricingTable:
        """Re-activate a stored version."""
        activated = self.store.activate(variant, version)
        self._invalidate(variant)
        return activated

    def clear_cache(self):
        if self.cache is not None:
            self.cache.invalidate()
            logger.info("Pricing cache cleared")

    def _invalidate(self, variant: str):
        if self.cache is not None:
            self.cache.invalidate(variant)
