"""
Pricing Store - versioned pricing tables persisted as JSON.

Keeps every published version of every variant's pricing table. At most one
table per variant is active; publishing or activating a version deactivates
the variant's previous active table in the same write.
"""
import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..engine.models import PricingTable

logger = logging.getLogger(__name__)


class PricingStoreError(Exception):
    """Base exception for pricing store failures."""
    pass


class PricingTableNotFound(PricingStoreError):
    """Raised when a variant has no active table or a version does not exist."""

    def __init__(self, variant: str, version: Optional[str] = None):
        if version is None:
            message = f"No active pricing table for variant '{variant}'"
        else:
            message = f"Pricing table '{version}' not found for variant '{variant}'"
        super().__init__(message)
        self.variant = variant
        self.version = version


class DuplicatePricingVersion(PricingStoreError):
    """Raised when publishing a version that already exists for the variant."""

    def __init__(self, variant: str, version: str):
        super().__init__(f"Pricing table '{version}' already exists for variant '{variant}'")
        self.variant = variant
        self.version = version


class InvalidPricingTable(PricingStoreError):
    """Raised when a pricing table fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("Invalid pricing table: " + "; ".join(errors))
        self.errors = errors


class PricingStore:
    """
    File-backed store of pricing tables.

    With path=None the store keeps its tables in memory only.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self._lock = threading.Lock()
        self._tables: list[PricingTable] = []

        if self.path and self.path.exists():
            self._load()

    def _load(self):
        """Load tables from the JSON file."""
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self._tables = [PricingTable.from_dict(t) for t in data.get('tables', [])]
        logger.info("Loaded %d pricing tables from %s", len(self._tables), self.path)

    def _write(self, tables: list[PricingTable]):
        """Replace the JSON file in one step so readers never see a half-written state."""
        if not self.path:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            'updated_at': datetime.now().isoformat(),
            'tables': [t.to_dict() for t in tables],
        }

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

    @staticmethod
    def _copy(table: PricingTable) -> PricingTable:
        return PricingTable.from_dict(table.to_dict())

    def variants(self) -> list[str]:
        """List variants that have at least one stored table, in publish order."""
        return list(dict.fromkeys(t.variant for t in self._tables))

    def list_tables(self, variant: Optional[str] = None) -> list[PricingTable]:
        """List stored tables, optionally for a single variant."""
        return [
            self._copy(t) for t in self._tables
            if variant is None or t.variant == variant
        ]

    def get_active(self, variant: str) -> PricingTable:
        """Get the active table for a variant."""
        for table in self._tables:
            if table.variant == variant and table.active:
                return self._copy(table)
        raise PricingTableNotFound(variant)

    def get_version(self, variant: str, version: str) -> PricingTable:
        """Get a specific version of a variant's table."""
        for table in self._tables:
            if table.variant == variant and table.version == version:
                return self._copy(table)
        raise PricingTableNotFound(variant, version)

    def publish(self, table: PricingTable) -> PricingTable:
        """
        Store a new version and make it the variant's active table.

        Raises:
            InvalidPricingTable: Table failed validation
            DuplicatePricingVersion: Version already stored for the variant
        """
        validation = table.validate()
        if not validation.valid:
            raise InvalidPricingTable(validation.errors)
        for warning in validation.warnings:
            logger.warning("Pricing table %s/%s: %s", table.variant, table.version, warning)

        with self._lock:
            if any(t.variant == table.variant and t.version == table.version for t in self._tables):
                raise DuplicatePricingVersion(table.variant, table.version)

            new_table = self._copy(table)
            new_table.active = True
            new_table.created_at = datetime.now().isoformat()

            tables = [self._deactivated(t, table.variant) for t in self._tables]
            tables.append(new_table)

            self._write(tables)
            self._tables = tables

        logger.info("Published pricing table %s/%s", new_table.variant, new_table.version)
        return self._copy(new_table)

    def activate(self, variant: str, version: str) -> PricingTable:
        """Make a stored version the variant's active table (e.g. to roll back)."""
        with self._lock:
            if not any(t.variant == variant and t.version == version for t in self._tables):
                raise PricingTableNotFound(variant, version)

            tables = []
            for t in self._tables:
                t = self._deactivated(t, variant)
                if t.variant == variant and t.version == version:
                    t.active = True
                tables.append(t)

            self._write(tables)
            self._tables = tables

        logger.info("Activated pricing table %s/%s", variant, version)
        return self.get_version(variant, version)

    def _deactivated(self, table: PricingTable, variant: str) -> PricingTable:
        """Copy of table, inactive if it belongs to variant."""
        copy = self._copy(table)
        if copy.variant == variant:
            copy.active = False
        return copy
