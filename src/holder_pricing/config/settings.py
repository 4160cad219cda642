"""
Centralized settings and path configuration for holder pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Persisted state
    pricing_store: Path
    order_ledger: Path

    # Optional seed sheet (CSV or XLSX) used by the build script
    price_sheet: Optional[Path] = None

    # Active pricing tables are cached for one minute; 0 disables the cache
    cache_ttl_seconds: float = 60.0

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        data_dir = Path(os.environ.get('HOLDER_PRICING_DATA_DIR', root / 'data'))

        price_sheet = None
        for name in ('price_sheet.xlsx', 'price_sheet.csv'):
            if (data_dir / name).exists():
                price_sheet = data_dir / name
                break

        return cls(
            project_root=root,
            data_dir=data_dir,
            pricing_store=data_dir / 'pricing_tables.json',
            order_ledger=data_dir / 'order_items.csv',
            price_sheet=price_sheet,
            cache_ttl_seconds=float(os.environ.get('HOLDER_PRICING_CACHE_TTL', 60)),
            log_level=os.environ.get('HOLDER_PRICING_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
