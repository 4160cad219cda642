"""
Price calculator tests.

Covers the literal glass holder scenarios plus the calculator's
invariants: base-only pricing, additivity, quantity scaling, strict
rejection of unknown options and variant isolation.
"""
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from holder_pricing.engine import (
    compute_price,
    PricingTable,
    Selection,
    InvalidQuantity,
    VariantMismatch,
    UnknownOptionValue,
    InvalidCustomFee,
    ConflictingOptionPrice,
)
from holder_pricing.data.defaults import default_tables


@pytest.fixture
def glass_table():
    return PricingTable(
        variant="glass_holder",
        version="2026-01-v1",
        base_price_cents=4990,
        color_prices={"base": {"green": 0, "red": 150}},
        finish_prices={"matte": 0, "glossy": 200},
        active=True,
    )


@pytest.fixture
def full_glass_table():
    return next(t for t in default_tables() if t.variant == "glass_holder")


def test_red_glossy_pair(glass_table):
    """Red base + glossy finish, two units."""
    selection = Selection(variant="glass_holder", colors={"base": "red"}, finish="glossy", quantity=2)
    breakdown = compute_price(selection, glass_table)

    assert breakdown.unit_price_cents == 5340
    assert breakdown.subtotal_cents == 10680
    assert breakdown.option_prices_cents == {"base": 150, "finish": 200}
    assert breakdown.pricing_version == "2026-01-v1"


def test_unknown_color_rejected(glass_table):
    selection = Selection(variant="glass_holder", colors={"base": "purple"})

    with pytest.raises(UnknownOptionValue) as exc_info:
        compute_price(selection, glass_table)

    assert exc_info.value.category == "base"
    assert exc_info.value.value == "purple"


@pytest.mark.parametrize("quantity", [0, -1, -50])
def test_non_positive_quantity_rejected(glass_table, quantity):
    selection = Selection(variant="glass_holder", quantity=quantity)
    with pytest.raises(InvalidQuantity):
        compute_price(selection, glass_table)


@pytest.mark.parametrize("quantity", [1.5, 2.0, "2", True, None])
def test_non_integer_quantity_rejected(glass_table, quantity):
    selection = Selection(variant="glass_holder", quantity=quantity)
    with pytest.raises(InvalidQuantity):
        compute_price(selection, glass_table)


def test_variant_mismatch(glass_table):
    selection = Selection(variant="bottle_holder")

    with pytest.raises(VariantMismatch) as exc_info:
        compute_price(selection, glass_table)

    assert exc_info.value.selection_variant == "bottle_holder"
    assert exc_info.value.table_variant == "glass_holder"


def test_no_options_is_base_price(glass_table):
    breakdown = compute_price(Selection(variant="glass_holder", colors={}), glass_table)

    assert breakdown.unit_price_cents == glass_table.base_price_cents
    assert breakdown.option_prices_cents == {}
    assert breakdown.custom_fee_cents == 0
    assert breakdown.subtotal_cents == glass_table.base_price_cents


def test_unpriced_parts_are_ignored(glass_table):
    """A part the table does not price contributes nothing and does not fail."""
    selection = Selection(variant="glass_holder", colors={"base": "green", "strap": "anything"})
    breakdown = compute_price(selection, glass_table)

    assert breakdown.option_prices_cents == {"base": 0}
    assert "strap" not in breakdown.option_prices_cents


def test_structural_options_priced(full_glass_table):
    selection = Selection(
        variant="glass_holder",
        colors={"base": "purple", "arm": "red", "module": "iceBlue", "pattern": "mint"},
        finish="goldEdition",
        arm_type="premiumArm",
        module_type="proModule",
        pattern_type="specialPattern",
        quantity=3,
    )
    breakdown = compute_price(selection, full_glass_table)

    assert breakdown.option_prices_cents == {
        "base": 200,
        "arm": 150,
        "module": 200,
        "pattern": 0,
        "finish": 1000,
        "arm_type": 450,
        "module_type": 600,
        "pattern_type": 300,
    }
    assert breakdown.unit_price_cents == 4990 + 200 + 150 + 200 + 0 + 1000 + 450 + 600 + 300
    assert breakdown.subtotal_cents == breakdown.unit_price_cents * 3


@pytest.mark.parametrize("field_name,value,category", [
    ("finish", "chrome", "finish"),
    ("arm_type", "flexArm", "arm_type"),
    ("module_type", "tripleModule", "module_type"),
    ("pattern_type", "camo", "pattern_type"),
])
def test_unknown_structural_option_rejected(full_glass_table, field_name, value, category):
    selection = Selection(variant="glass_holder", **{field_name: value})

    with pytest.raises(UnknownOptionValue) as exc_info:
        compute_price(selection, full_glass_table)

    assert exc_info.value.category == category
    assert exc_info.value.value == value
    assert exc_info.value.details == {"category": category, "value": value}


def test_module_palette_excludes_other_materials(full_glass_table):
    """Mint is a base color but not an adapter module color."""
    selection = Selection(variant="glass_holder", colors={"base": "mint", "module": "mint"})
    with pytest.raises(UnknownOptionValue) as exc_info:
        compute_price(selection, full_glass_table)
    assert exc_info.value.category == "module"


def test_bottle_holder_has_no_arm_pricing():
    bottle = next(t for t in default_tables() if t.variant == "bottle_holder")

    # Arm color is not a priced part for bottles and is ignored
    breakdown = compute_price(Selection(variant="bottle_holder", colors={"arm": "purple"}), bottle)
    assert breakdown.unit_price_cents == bottle.base_price_cents

    # A structural arm type has nothing to match against
    with pytest.raises(UnknownOptionValue):
        compute_price(Selection(variant="bottle_holder", arm_type="premiumArm"), bottle)


def test_additivity_with_custom_fee(glass_table):
    selection = Selection(variant="glass_holder", colors={"base": "red"}, finish="glossy", quantity=4)
    breakdown = compute_price(selection, glass_table, custom_fee_cents=275)

    parts = breakdown.base_price_cents + sum(breakdown.option_prices_cents.values()) + breakdown.custom_fee_cents
    assert breakdown.unit_price_cents == parts == 5615
    assert breakdown.subtotal_cents == 5615 * 4


def test_negative_custom_fee_allowed_until_zero(glass_table):
    breakdown = compute_price(Selection(variant="glass_holder"), glass_table, custom_fee_cents=-4990)
    assert breakdown.unit_price_cents == 0

    with pytest.raises(InvalidCustomFee):
        compute_price(Selection(variant="glass_holder"), glass_table, custom_fee_cents=-4991)


def test_fractional_custom_fee_rejected(glass_table):
    with pytest.raises(InvalidCustomFee):
        compute_price(Selection(variant="glass_holder"), glass_table, custom_fee_cents=1.5)


def test_color_part_named_like_finish_is_not_overwritten():
    # Such a table fails validation, but an unvalidated one must not undercount
    table = PricingTable(
        variant="glass_holder",
        version="v1",
        base_price_cents=1000,
        color_prices={"finish": {"gold": 500}},
        finish_prices={"glossy": 200},
    )
    selection = Selection(variant="glass_holder", colors={"finish": "gold"}, finish="glossy")

    with pytest.raises(ConflictingOptionPrice) as exc_info:
        compute_price(selection, table)
    assert exc_info.value.key == "finish"

    # Either option alone still prices normally
    assert compute_price(Selection(variant="glass_holder", colors={"finish": "gold"}), table).unit_price_cents == 1500
    assert compute_price(Selection(variant="glass_holder", finish="glossy"), table).unit_price_cents == 1200


@pytest.mark.parametrize("quantity", [1, 2, 7, 100, 10_000])
def test_quantity_scaling(glass_table, quantity):
    selection = Selection(variant="glass_holder", colors={"base": "red"}, quantity=quantity)
    breakdown = compute_price(selection, glass_table)

    assert breakdown.subtotal_cents == breakdown.unit_price_cents * quantity
    assert isinstance(breakdown.subtotal_cents, int)


def test_deterministic(full_glass_table):
    selection = Selection(
        variant="glass_holder",
        colors={"pattern": "purple", "base": "red"},
        finish="textured",
        module_type="doubleModule",
        quantity=2,
    )
    first = compute_price(selection, full_glass_table)
    second = compute_price(selection, full_glass_table)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert list(first.option_prices_cents) == ["pattern", "base", "finish", "module_type"]


def test_variant_isolation():
    """Tables sharing option names still price their own variant only."""
    glass = PricingTable(variant="glass_holder", version="g1", base_price_cents=1990,
                         finish_prices={"glossy": 200})
    bottle = PricingTable(variant="bottle_holder", version="b1", base_price_cents=2490,
                          finish_prices={"glossy": 500})

    glass_price = compute_price(Selection(variant="glass_holder", finish="glossy"), glass)
    bottle_price = compute_price(Selection(variant="bottle_holder", finish="glossy"), bottle)

    assert glass_price.unit_price_cents == 2190
    assert bottle_price.unit_price_cents == 2990
    assert glass_price.pricing_version == "g1"
    assert bottle_price.pricing_version == "b1"


def test_calculation_does_not_mutate_inputs(glass_table):
    before = glass_table.to_dict()
    selection = Selection(variant="glass_holder", colors={"base": "red"}, finish="glossy")
    compute_price(selection, glass_table)

    assert glass_table.to_dict() == before
    assert selection.colors == {"base": "red"}


def test_breakdown_text(glass_table):
    selection = Selection(variant="glass_holder", colors={"base": "red"}, finish="glossy", quantity=2)
    text = compute_price(selection, glass_table).get_breakdown_text()

    assert "→ Base: 49.90 €" in text
    assert "→ base: +1.50 €" in text
    assert "→ Subtotal: 2 × 53.40 € = 106.80 €" in text
