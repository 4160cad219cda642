"""
Default pricing tables for the glass and bottle holders (version 2026-01-v1).

Only used to seed an empty store; the store is the source of truth once a
variant has an active table.
"""
import logging
from typing import Optional

from ..engine.models import PricingTable
from ..store.pricing_store import PricingStore

logger = logging.getLogger(__name__)

DEFAULT_VERSION = '2026-01-v1'

_COLOR_UPCHARGES = {'green': 0, 'purple': 200, 'iceBlue': 200, 'red': 150, 'mint': 0}


def default_tables() -> list[PricingTable]:
    """Build fresh default tables (the bottle holder has no arm or module)."""
    glass = PricingTable(
        variant='glass_holder',
        version=DEFAULT_VERSION,
        base_price_cents=4990,
        color_prices={
            'base': dict(_COLOR_UPCHARGES),
            'arm': dict(_COLOR_UPCHARGES),
            # The adapter module uses a different material with its own palette
            'module': {'red': 150, 'black': 0, 'iceBlue': 200, 'green': 0, 'grey': 0},
            'pattern': {'red': 0, 'green': 0, 'purple': 200, 'iceBlue': 200, 'mint': 0},
        },
        finish_prices={'matte': 0, 'glossy': 200, 'textured': 300, 'goldEdition': 1000},
        arm_prices={'standardArm': 0, 'premiumArm': 450},
        module_prices={'singleModule': 0, 'doubleModule': 250, 'proModule': 600},
        pattern_prices={'standardPattern': 0, 'specialPattern': 300},
    )

    bottle = PricingTable(
        variant='bottle_holder',
        version=DEFAULT_VERSION,
        base_price_cents=4990,
        color_prices={
            'base': dict(_COLOR_UPCHARGES),
            'pattern': {'red': 0, 'green': 0, 'purple': 200, 'iceBlue': 200, 'mint': 0},
        },
        finish_prices={'matte': 0, 'glossy': 200, 'textured': 300, 'goldEdition': 1000},
        pattern_prices={'standardPattern': 0, 'specialPattern': 300},
    )

    return [glass, bottle]


def seed_default_tables(store: PricingStore, tables: Optional[list[PricingTable]] = None) -> list[str]:
    """
    Publish tables for variants that have no active table yet.

    Returns the variants that were seeded.
    """
    active_variants = {t.variant for t in store.list_tables() if t.active}

    seeded = []
    for table in tables if tables is not None else default_tables():
        if table.variant in active_variants:
            continue

        store.publish(table)
        seeded.append(table.variant)
        logger.info("Seeded pricing table %s/%s", table.variant, table.version)

    return seeded
