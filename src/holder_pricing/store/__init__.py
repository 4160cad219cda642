"""Store subpackage - persisted pricing tables and their cache."""
from .pricing_store import (
    PricingStore,
    PricingStoreError,
    PricingTableNotFound,
    DuplicatePricingVersion,
    InvalidPricingTable,
)
from .cache import PricingTableCache

__all__ = [
    'PricingStore', 'PricingTableCache',
    'PricingStoreError', 'PricingTableNotFound', 'DuplicatePricingVersion', 'InvalidPricingTable',
]
