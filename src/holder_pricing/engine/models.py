"""
Data models for the price calculator.

Uses dataclasses for structured, type-safe data representation.
All monetary values are integer cents.
"""
from dataclasses import dataclass, field
from typing import Optional


# Category key -> PricingTable attribute holding its prices
STRUCTURAL_CATEGORIES = {
    'arm_type': 'arm_prices',
    'module_type': 'module_prices',
    'pattern_type': 'pattern_prices',
}

# Breakdown keys taken by non-color options; color parts may not use them
RESERVED_OPTION_KEYS = frozenset({'finish', *STRUCTURAL_CATEGORIES})


def _is_cents(value) -> bool:
    """True for plain ints (bool is rejected even though it subclasses int)."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class ValidationResult:
    """Result of pricing table validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False


@dataclass
class PricingTable:
    """A versioned set of base price and upcharges for one product variant."""
    variant: str
    base_price_cents: int
    color_prices: dict[str, dict[str, int]] = field(default_factory=dict)  # part -> color -> cents
    finish_prices: dict[str, int] = field(default_factory=dict)
    arm_prices: dict[str, int] = field(default_factory=dict)
    module_prices: dict[str, int] = field(default_factory=dict)
    pattern_prices: dict[str, int] = field(default_factory=dict)
    active: bool = False
    version: str = ""
    created_at: Optional[str] = None  # set by the store on publish

    def validate(self) -> ValidationResult:
        """Check identifiers and that every price is a non-negative integer."""
        result = ValidationResult(valid=True)

        if not self.variant:
            result.add_error("Variant is required")
        if not self.version:
            result.add_error("Version is required")

        if not _is_cents(self.base_price_cents):
            result.add_error(f"Base price must be integer cents, got {self.base_price_cents!r}")
        elif self.base_price_cents < 0:
            result.add_error("Base price must not be negative")

        for part in self.color_prices:
            if part in RESERVED_OPTION_KEYS:
                result.add_error(f"Color part '{part}' clashes with the '{part}' option price")

        price_maps = {f"color_prices.{part}": prices for part, prices in self.color_prices.items()}
        price_maps.update({
            'finish_prices': self.finish_prices,
            'arm_prices': self.arm_prices,
            'module_prices': self.module_prices,
            'pattern_prices': self.pattern_prices,
        })

        for name, prices in price_maps.items():
            if not prices:
                result.warnings.append(f"{name} is empty")
                continue
            for option, cents in prices.items():
                if not _is_cents(cents):
                    result.add_error(f"{name}[{option}] must be integer cents, got {cents!r}")
                elif cents < 0:
                    result.add_error(f"{name}[{option}] must not be negative")

        return result

    def to_dict(self) -> dict:
        return {
            'variant': self.variant,
            'version': self.version,
            'active': self.active,
            'base_price_cents': self.base_price_cents,
            'color_prices': {part: dict(prices) for part, prices in self.color_prices.items()},
            'finish_prices': dict(self.finish_prices),
            'arm_prices': dict(self.arm_prices),
            'module_prices': dict(self.module_prices),
            'pattern_prices': dict(self.pattern_prices),
            'created_at': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingTable':
        return cls(
            variant=data.get('variant', ''),
            version=data.get('version', ''),
            active=bool(data.get('active', False)),
            base_price_cents=data.get('base_price_cents', 0),
            color_prices={
                part: dict(prices)
                for part, prices in (data.get('color_prices') or {}).items()
            },
            finish_prices=dict(data.get('finish_prices') or {}),
            arm_prices=dict(data.get('arm_prices') or {}),
            module_prices=dict(data.get('module_prices') or {}),
            pattern_prices=dict(data.get('pattern_prices') or {}),
            created_at=data.get('created_at'),
        )


@dataclass
class Selection:
    """The options a customer picked for one configured item."""
    variant: str
    colors: dict[str, str] = field(default_factory=dict)  # part -> color
    finish: Optional[str] = None
    arm_type: Optional[str] = None
    module_type: Optional[str] = None
    pattern_type: Optional[str] = None
    quantity: int = 1

    def to_dict(self) -> dict:
        return {
            'variant': self.variant,
            'colors': dict(self.colors),
            'finish': self.finish,
            'arm_type': self.arm_type,
            'module_type': self.module_type,
            'pattern_type': self.pattern_type,
            'quantity': self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Selection':
        return cls(
            variant=data.get('variant', ''),
            colors=dict(data.get('colors') or {}),
            finish=data.get('finish'),
            arm_type=data.get('arm_type'),
            module_type=data.get('module_type'),
            pattern_type=data.get('pattern_type'),
            quantity=data.get('quantity', 1),
        )


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized price of one order line, stored verbatim with the order item."""
    base_price_cents: int
    option_prices_cents: dict[str, int]
    custom_fee_cents: int
    unit_price_cents: int
    quantity: int
    subtotal_cents: int
    pricing_version: str

    def to_dict(self) -> dict:
        return {
            'pricing_version': self.pricing_version,
            'base_price_cents': self.base_price_cents,
            'option_prices_cents': dict(self.option_prices_cents),
            'custom_fee_cents': self.custom_fee_cents,
            'unit_price_cents': self.unit_price_cents,
            'quantity': self.quantity,
            'subtotal_cents': self.subtotal_cents,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PriceBreakdown':
        return cls(
            base_price_cents=data['base_price_cents'],
            option_prices_cents=dict(data.get('option_prices_cents') or {}),
            custom_fee_cents=data.get('custom_fee_cents', 0),
            unit_price_cents=data['unit_price_cents'],
            quantity=data['quantity'],
            subtotal_cents=data['subtotal_cents'],
            pricing_version=data.get('pricing_version', ''),
        )

    def get_breakdown_text(self) -> str:
        """Get human-readable breakdown as formatted text."""
        lines = [f"→ Base: {format_cents(self.base_price_cents)}"]
        for category, cents in self.option_prices_cents.items():
            lines.append(f"→ {category}: +{format_cents(cents)}")
        if self.custom_fee_cents:
            lines.append(f"→ Custom fee: {format_cents(self.custom_fee_cents)}")
        lines.append(f"→ Unit price: {format_cents(self.unit_price_cents)}")
        lines.append(
            f"→ Subtotal: {self.quantity} × {format_cents(self.unit_price_cents)}"
            f" = {format_cents(self.subtotal_cents)}"
        )
        return "\n".join(lines)


@dataclass(frozen=True)
class CartQuote:
    """Breakdowns for every item of a cart, in request order, and their sum."""
    items: list[PriceBreakdown]
    subtotal_cents: int

    def to_dict(self) -> dict:
        return {
            'items': [b.to_dict() for b in self.items],
            'item_count': len(self.items),
            'subtotal_cents': self.subtotal_cents,
        }


def format_cents(cents: int) -> str:
    """Format integer cents as a euro amount, e.g. 5340 -> '53.40 €'."""
    sign = "-" if cents < 0 else ""
    euros, rest = divmod(abs(cents), 100)
    return f"{sign}{euros}.{rest:02d} €"
