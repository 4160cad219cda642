"""
Price sheet import/export tests.
"""
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from holder_pricing.data.price_sheet import (
    SHEET_COLUMNS,
    export_price_sheet,
    load_price_sheet,
    table_to_frame,
)
from holder_pricing.data.defaults import default_tables
from holder_pricing.store import InvalidPricingTable, PricingStore


SHEET_CSV = """variant,version,category,part,option,price_cents
glass_holder,2026-02-v1,base,,,1990
glass_holder,2026-02-v1,color,base,green,0
glass_holder,2026-02-v1,color,base,red,150
glass_holder,2026-02-v1,color,arm,red,150
glass_holder,2026-02-v1,finish,,glossy,200
glass_holder,2026-02-v1,arm,,premiumArm,450
glass_holder,2026-02-v1,module,,proModule,600
glass_holder,2026-02-v1,pattern,,specialPattern,300
bottle_holder,2026-02-v1,base,,,2490
bottle_holder,2026-02-v1, Finish ,,matte, 0
"""


def write_sheet(tmp_path, content, name="price_sheet.csv"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_load_csv_sheet(tmp_path):
    tables = load_price_sheet(write_sheet(tmp_path, SHEET_CSV))

    assert [(t.variant, t.version) for t in tables] == [
        ("glass_holder", "2026-02-v1"),
        ("bottle_holder", "2026-02-v1"),
    ]

    glass, bottle = tables
    assert glass.base_price_cents == 1990
    assert glass.color_prices == {"base": {"green": 0, "red": 150}, "arm": {"red": 150}}
    assert glass.finish_prices == {"glossy": 200}
    assert glass.arm_prices == {"premiumArm": 450}
    assert glass.module_prices == {"proModule": 600}
    assert glass.pattern_prices == {"specialPattern": 300}
    assert glass.active is False

    # Whitespace and case in cells are normalized
    assert bottle.base_price_cents == 2490
    assert bottle.finish_prices == {"matte": 0}


def test_loaded_tables_publish(tmp_path):
    store = PricingStore(tmp_path / "pricing_tables.json")
    for table in load_price_sheet(write_sheet(tmp_path, SHEET_CSV)):
        store.publish(table)

    assert store.get_active("glass_holder").base_price_cents == 1990
    assert store.get_active("bottle_holder").version == "2026-02-v1"


@pytest.mark.parametrize("bad_row,fragment", [
    ("glass_holder,v1,finish,,glossy,2.00", "price_cents must be integer cents"),
    ("glass_holder,v1,finish,,glossy,", "price_cents must be integer cents"),
    ("glass_holder,v1,engraving,,name,500", "unknown category 'engraving'"),
    ("glass_holder,v1,color,,red,150", "color rows need a part"),
    ("glass_holder,v1,base,,,100", "Row 3: duplicate base price for 'glass_holder' (first set on row 2)"),
    ("glass_holder,v1,finish,,glossy,200\nglass_holder,v1,finish,,glossy,0",
     "Row 4: duplicate finish price for 'glossy' (first set on row 3)"),
    ("glass_holder,v1,color,base,red,150\nglass_holder,v1,color,base,red,0",
     "Row 4: duplicate color price for 'red' (first set on row 3)"),
])
def test_bad_rows_rejected(tmp_path, bad_row, fragment):
    content = "variant,version,category,part,option,price_cents\nglass_holder,v1,base,,,4990\n" + bad_row + "\n"

    with pytest.raises(InvalidPricingTable) as exc_info:
        load_price_sheet(write_sheet(tmp_path, content))

    assert any(fragment in e for e in exc_info.value.errors)


def test_missing_base_row(tmp_path):
    content = "variant,version,category,part,option,price_cents\nglass_holder,v1,finish,,glossy,200\n"

    with pytest.raises(InvalidPricingTable) as exc_info:
        load_price_sheet(write_sheet(tmp_path, content))
    assert "glass_holder/v1: no base price row" in exc_info.value.errors


def test_missing_columns(tmp_path):
    with pytest.raises(InvalidPricingTable):
        load_price_sheet(write_sheet(tmp_path, "variant,version,price\nglass_holder,v1,4990\n"))


def test_table_to_frame():
    glass = next(t for t in default_tables() if t.variant == "glass_holder")
    df = table_to_frame(glass)

    assert list(df.columns) == SHEET_COLUMNS
    base_rows = df[df["category"] == "base"]
    assert len(base_rows) == 1
    assert int(base_rows.iloc[0]["price_cents"]) == 4990
    assert len(df[(df["category"] == "color") & (df["part"] == "module")]) == 5


@pytest.mark.parametrize("name", ["sheet.csv", "sheet.xlsx"])
def test_export_then_load(tmp_path, name):
    tables = default_tables()
    path = export_price_sheet(tables, tmp_path / name)
    loaded = load_price_sheet(path)

    assert [t.to_dict() for t in loaded] == [t.to_dict() for t in tables]
