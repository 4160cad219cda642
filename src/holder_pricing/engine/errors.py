"""
Pricing errors raised by the price calculator.

All of these are input-validation failures. None of them are retryable:
they point at either a caller bug (wrong table) or a pricing table that is
missing an option the configurator still offers.
"""
from typing import Optional


class PricingError(Exception):
    """
    Base exception for all price calculation failures.

    Attributes:
        message: Human-readable error message
        details: Dict with the offending values for diagnostics
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class InvalidQuantity(PricingError):
    """Raised when the quantity is not a positive integer."""

    def __init__(self, quantity):
        super().__init__(
            f"Quantity must be a positive integer, got {quantity!r}",
            details={'quantity': quantity}
        )
        self.quantity = quantity


class VariantMismatch(PricingError):
    """Raised when a selection is priced against another variant's table."""

    def __init__(self, selection_variant: str, table_variant: str):
        super().__init__(
            f"Selection variant '{selection_variant}' does not match "
            f"pricing table variant '{table_variant}'",
            details={'selection_variant': selection_variant, 'table_variant': table_variant}
        )
        self.selection_variant = selection_variant
        self.table_variant = table_variant


class UnknownOptionValue(PricingError):
    """Raised when a selected option has no price in the pricing table."""

    def __init__(self, category: str, value: str):
        super().__init__(
            f"No price for {category} option '{value}'",
            details={'category': category, 'value': value}
        )
        self.category = category
        self.value = value


class InvalidCustomFee(PricingError):
    """Raised when a custom fee is not an integer or drives the unit price below zero."""

    def __init__(self, custom_fee_cents, reason: str):
        super().__init__(
            f"Invalid custom fee {custom_fee_cents!r}: {reason}",
            details={'custom_fee_cents': custom_fee_cents}
        )
        self.custom_fee_cents = custom_fee_cents


class ConflictingOptionPrice(PricingError):
    """Raised when two options of a selection resolve to the same breakdown key."""

    def __init__(self, key: str):
        super().__init__(
            f"Option price '{key}' is set twice; the pricing table reuses a reserved key",
            details={'key': key}
        )
        self.key = key


class PriceMismatch(PricingError):
    """Raised when a client-submitted unit price differs from the server price."""

    def __init__(self, index: int, expected_cents: int, submitted_cents: int):
        super().__init__(
            f"Item {index}: submitted unit price {submitted_cents} != server price {expected_cents}",
            details={
                'index': index,
                'expected_unit_price_cents': expected_cents,
                'submitted_unit_price_cents': submitted_cents,
            }
        )
        self.index = index
        self.expected_cents = expected_cents
        self.submitted_cents = submitted_cents


class EmptyCart(PricingError):
    """Raised when a cart quote is requested for no items."""

    def __init__(self):
        super().__init__("Cart must contain at least one item")
