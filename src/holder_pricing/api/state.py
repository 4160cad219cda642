"""
Shared service instances for the API.

Routers depend on get_service/get_ledger so tests can swap them through
app.dependency_overrides.
"""
from ..config.settings import get_settings
from ..orders.order_ledger import OrderLedger
from ..services.pricing_service import PricingService
from ..store.cache import PricingTableCache
from ..store.pricing_store import PricingStore

settings = get_settings()

store = PricingStore(settings.pricing_store)
cache = PricingTableCache(settings.cache_ttl_seconds) if settings.cache_ttl_seconds > 0 else None
service = PricingService(store, cache)
ledger = OrderLedger(settings.order_ledger)


def get_service() -> PricingService:
    return service


def get_ledger() -> OrderLedger:
    return ledger
