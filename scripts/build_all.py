#!/usr/bin/env python
"""
Build pipeline - seeds the pricing store and runs the test suite.

Publishes tables from data/price_sheet.(xlsx|csv) when present, otherwise
the built-in defaults, for every variant that has no active table yet.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from holder_pricing.config.settings import get_settings
from holder_pricing.data.defaults import default_tables, seed_default_tables
from holder_pricing.data.price_sheet import load_price_sheet
from holder_pricing.store import PricingStore, PricingStoreError


def main():
    print("=" * 60)
    print("HOLDER PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    settings = get_settings()
    store = PricingStore(settings.pricing_store)

    print("[1/2] Seeding pricing store...")
    try:
        if settings.price_sheet:
            print(f"Using price sheet {settings.price_sheet}")
            tables = load_price_sheet(settings.price_sheet)
        else:
            print("No price sheet found - using built-in default tables")
            tables = default_tables()
        seeded = seed_default_tables(store, tables)
    except PricingStoreError as e:
        print("\n❌ BUILD FAILED")
        print(f"  ERROR: {e}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Store: {settings.pricing_store}")
    print(f"  Seeded: {', '.join(seeded) if seeded else 'nothing (all variants already active)'}")
    print()
    print("Active tables:")
    for variant in store.variants():
        table = store.get_active(variant)
        print(f"  {variant}: {table.version} (base {table.base_price_cents} cents)")


if __name__ == "__main__":
    main()
