"""Engine subpackage - price calculation and its data models."""
from .price_calculator import compute_price
from .models import PricingTable, Selection, PriceBreakdown, ValidationResult, CartQuote
from .errors import (
    PricingError,
    InvalidQuantity,
    VariantMismatch,
    UnknownOptionValue,
    InvalidCustomFee,
    ConflictingOptionPrice,
    PriceMismatch,
    EmptyCart,
)

__all__ = [
    'compute_price',
    'PricingTable', 'Selection', 'PriceBreakdown', 'ValidationResult', 'CartQuote',
    'PricingError', 'InvalidQuantity', 'VariantMismatch', 'UnknownOptionValue', 'InvalidCustomFee',
    'ConflictingOptionPrice', 'PriceMismatch', 'EmptyCart',
]
