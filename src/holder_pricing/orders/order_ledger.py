"""
Order Ledger - append-only record of priced order items.

Each order item (order_id + line_id) is written once with its breakdown
stored verbatim. Items are never re-priced; a later change to a pricing
table does not touch recorded rows.
"""
import csv
import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..engine.models import PriceBreakdown, Selection

logger = logging.getLogger(__name__)


class OrderLedgerError(Exception):
    """Base exception for order ledger failures."""
    pass


class DuplicateOrderItem(OrderLedgerError):
    """Raised when an order item is recorded a second time."""

    def __init__(self, order_id: str, line_id: str):
        super().__init__(f"Order item {order_id}/{line_id} is already recorded")
        self.order_id = order_id
        self.line_id = line_id


class OrderItemNotFound(OrderLedgerError):
    """Raised when an order item or order does not exist."""

    def __init__(self, order_id: str, line_id: Optional[str] = None):
        target = f"{order_id}/{line_id}" if line_id is not None else order_id
        super().__init__(f"Order item {target} not found")
        self.order_id = order_id
        self.line_id = line_id


def _is_amount(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class OrderItem:
    """A recorded order line."""
    order_id: str
    line_id: str
    selection: Selection
    breakdown: PriceBreakdown
    subtotal_cents: int
    recorded_at: str

    def to_dict(self) -> dict:
        return {
            'order_id': self.order_id,
            'line_id': self.line_id,
            'selection': self.selection.to_dict(),
            'breakdown': self.breakdown.to_dict(),
            'subtotal_cents': self.subtotal_cents,
            'recorded_at': self.recorded_at,
        }


@dataclass(frozen=True)
class AuditFinding:
    """A stored order item whose amounts do not add up."""
    order_id: str
    line_id: str
    problem: str


class OrderLedger:
    """CSV-backed ledger of order items."""

    CSV_COLUMNS = [
        'order_id', 'line_id', 'variant', 'quantity', 'selection',
        'breakdown', 'pricing_version', 'subtotal_cents', 'recorded_at'
    ]

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()

    def _read_rows(self) -> list[dict]:
        if not self.path.exists():
            return []
        with open(self.path, 'r', encoding='utf-8', newline='') as f:
            return [row for row in csv.DictReader(f) if row.get('order_id')]

    @staticmethod
    def _row_to_item(row: dict) -> OrderItem:
        return OrderItem(
            order_id=row['order_id'],
            line_id=row['line_id'],
            selection=Selection.from_dict(json.loads(row['selection'])),
            breakdown=PriceBreakdown.from_dict(json.loads(row['breakdown'])),
            subtotal_cents=int(row['subtotal_cents']),
            recorded_at=row['recorded_at'],
        )

    def record_item(
        self,
        order_id: str,
        line_id: str,
        selection: Selection,
        breakdown: PriceBreakdown
    ) -> OrderItem:
        """Append an order item. Raises DuplicateOrderItem if the key exists."""
        item = OrderItem(
            order_id=str(order_id),
            line_id=str(line_id),
            selection=selection,
            breakdown=breakdown,
            subtotal_cents=breakdown.subtotal_cents,
            recorded_at=datetime.now().isoformat(),
        )

        with self._lock:
            rows = self._read_rows()
            if any(r['order_id'] == item.order_id and r['line_id'] == item.line_id for r in rows):
                raise DuplicateOrderItem(item.order_id, item.line_id)

            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_header = not self.path.exists() or self.path.stat().st_size == 0
            with open(self.path, 'a', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
                if write_header:
                    writer.writeheader()
                writer.writerow({
                    'order_id': item.order_id,
                    'line_id': item.line_id,
                    'variant': selection.variant,
                    'quantity': str(breakdown.quantity),
                    'selection': json.dumps(selection.to_dict(), sort_keys=True),
                    'breakdown': json.dumps(breakdown.to_dict()),
                    'pricing_version': breakdown.pricing_version,
                    'subtotal_cents': str(item.subtotal_cents),
                    'recorded_at': item.recorded_at,
                })

        logger.info(
            "Recorded order item %s/%s (%s, %d cents, pricing %s)",
            item.order_id, item.line_id, selection.variant,
            item.subtotal_cents, breakdown.pricing_version
        )
        return item

    def get_item(self, order_id: str, line_id: str) -> OrderItem:
        for row in self._read_rows():
            if row['order_id'] == str(order_id) and row['line_id'] == str(line_id):
                return self._row_to_item(row)
        raise OrderItemNotFound(str(order_id), str(line_id))

    def list_items(self, order_id: str) -> list[OrderItem]:
        """List an order's items in the order they were recorded."""
        return [
            self._row_to_item(row) for row in self._read_rows()
            if row['order_id'] == str(order_id)
        ]

    def order_total_cents(self, order_id: str) -> int:
        items = self.list_items(order_id)
        if not items:
            raise OrderItemNotFound(str(order_id))
        return sum(item.subtotal_cents for item in items)

    def audit(self) -> list[AuditFinding]:
        """
        Check every stored item for internal consistency.

        Flags items whose unit price is not the sum of its parts, whose
        subtotal is not unit price × quantity, or whose subtotal column
        disagrees with the stored breakdown.
        """
        findings = []

        for row in self._read_rows():
            order_id, line_id = row['order_id'], row['line_id']
            # Hand-edited rows may hold any JSON; anything unusable is a finding
            try:
                breakdown = json.loads(row['breakdown'])
                stored_subtotal = int(row['subtotal_cents'])
                if not isinstance(breakdown, dict):
                    raise TypeError(f"breakdown is a JSON {type(breakdown).__name__}, not an object")
                expected_unit = (
                    breakdown.get('base_price_cents', 0)
                    + sum(breakdown.get('option_prices_cents', {}).values())
                    + breakdown.get('custom_fee_cents', 0)
                )
                unit = breakdown.get('unit_price_cents')
                quantity = breakdown.get('quantity')
                if not all(_is_amount(v) for v in (expected_unit, unit, quantity) if v is not None):
                    raise TypeError("breakdown amounts must be integers")
            except (ValueError, TypeError, AttributeError) as e:
                findings.append(AuditFinding(order_id, line_id, f"Unreadable row: {e}"))
                continue

            if unit != expected_unit:
                findings.append(AuditFinding(
                    order_id, line_id,
                    f"Unit price {unit} != base + options + fee ({expected_unit})"
                ))
            if unit is not None and quantity is not None and breakdown.get('subtotal_cents') != unit * quantity:
                findings.append(AuditFinding(
                    order_id, line_id,
                    f"Subtotal {breakdown.get('subtotal_cents')} != {unit} × {quantity}"
                ))
            if stored_subtotal != breakdown.get('subtotal_cents'):
                findings.append(AuditFinding(
                    order_id, line_id,
                    f"Stored subtotal {stored_subtotal} != breakdown subtotal {breakdown.get('subtotal_cents')}"
                ))

        if findings:
            logger.warning("Order ledger audit found %d problems", len(findings))
        return findings
