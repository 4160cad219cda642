"""
Price Sheet - flat tabular form of pricing tables.

One row per price:

    variant, version, category, part, option, price_cents

category is one of base/color/finish/arm/module/pattern. part is only read
for color rows; option is ignored for base rows. Sheets may be CSV or XLSX.
"""
import re
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..engine.models import PricingTable
from ..store.pricing_store import InvalidPricingTable

SHEET_COLUMNS = ['variant', 'version', 'category', 'part', 'option', 'price_cents']

# Sheet category -> PricingTable attribute for flat option maps
OPTION_CATEGORIES = {
    'finish': 'finish_prices',
    'arm': 'arm_prices',
    'module': 'module_prices',
    'pattern': 'pattern_prices',
}

_CENTS_PATTERN = re.compile(r'^-?\d+$')


def read_sheet(path: Path, sheet_name: Optional[str] = None) -> pd.DataFrame:
    """Read a CSV or XLSX price sheet as normalized strings."""
    if path.suffix.lower() in ('.xlsx', '.xls'):
        df = pd.read_excel(path, sheet_name=sheet_name or 0, dtype=str, keep_default_na=False)
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)

    df = df.fillna('')
    # Strip all strings and headers
    df.columns = [str(c).strip().lower() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    missing = [c for c in SHEET_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidPricingTable([f"Price sheet is missing columns: {', '.join(missing)}"])
    return df


def _parse_cents(value: str, row_num: int) -> int:
    if not _CENTS_PATTERN.match(value):
        raise InvalidPricingTable([f"Row {row_num}: price_cents must be integer cents, got '{value}'"])
    return int(value)


def frame_to_tables(df: pd.DataFrame) -> list[PricingTable]:
    """
    Build one PricingTable per (variant, version) found in the frame.

    Tables come back inactive; publish them through the store to activate.
    """
    tables = []
    errors = []

    for (variant, version), group in df.groupby(['variant', 'version'], sort=False):
        table = PricingTable(variant=variant, version=version, base_price_cents=0)
        # Price key -> row number that first set it
        seen: dict[tuple, int] = {}

        # Row numbers are 1-based and count the header line
        for idx, row in group.iterrows():
            row_num = int(idx) + 2
            category = row['category'].lower()
            cents = _parse_cents(row['price_cents'], row_num)

            if category == 'base':
                key = ('base',)
            elif category == 'color':
                key = (category, row['part'], row['option'])
            else:
                key = (category, '', row['option'])
            if key in seen:
                errors.append(
                    f"Row {row_num}: duplicate {category} price for '{row['option'] or variant}' "
                    f"(first set on row {seen[key]})"
                )
                continue
            seen[key] = row_num

            if category == 'base':
                table.base_price_cents = cents
            elif category == 'color':
                if not row['part']:
                    errors.append(f"Row {row_num}: color rows need a part")
                    continue
                table.color_prices.setdefault(row['part'], {})[row['option']] = cents
            elif category in OPTION_CATEGORIES:
                getattr(table, OPTION_CATEGORIES[category])[row['option']] = cents
            else:
                errors.append(f"Row {row_num}: unknown category '{row['category']}'")

        if ('base',) not in seen:
            errors.append(f"{variant}/{version}: no base price row")
        tables.append(table)

    if errors:
        raise InvalidPricingTable(errors)
    return tables


def load_price_sheet(path: Path, sheet_name: Optional[str] = None) -> list[PricingTable]:
    """Load pricing tables from a CSV or XLSX price sheet."""
    return frame_to_tables(read_sheet(path, sheet_name))


def table_to_frame(table: PricingTable) -> pd.DataFrame:
    """Flatten a pricing table into price sheet rows."""
    rows = [{
        'variant': table.variant, 'version': table.version, 'category': 'base',
        'part': '', 'option': '', 'price_cents': table.base_price_cents,
    }]

    for part, prices in table.color_prices.items():
        for color, cents in prices.items():
            rows.append({
                'variant': table.variant, 'version': table.version, 'category': 'color',
                'part': part, 'option': color, 'price_cents': cents,
            })

    for category, attr in OPTION_CATEGORIES.items():
        for option, cents in getattr(table, attr).items():
            rows.append({
                'variant': table.variant, 'version': table.version, 'category': category,
                'part': '', 'option': option, 'price_cents': cents,
            })

    return pd.DataFrame(rows, columns=SHEET_COLUMNS)


def export_price_sheet(tables: Iterable[PricingTable], path: Path) -> Path:
    """Write tables to a CSV or XLSX price sheet."""
    frames = [table_to_frame(t) for t in tables]
    df = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame(columns=SHEET_COLUMNS)

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == '.xlsx':
        df.to_excel(path, index=False, sheet_name='Pricing')
    else:
        df.to_csv(path, index=False)
    return path
