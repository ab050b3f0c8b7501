"""
Store — the external record store the till talks to.

    from pawpos import store as R

    store = R.MemoryRecordStore()
    store.add_product(R.Product("p1", "Kibble 1kg", Decimal(15000), stock_quantity=10))

    engine, sessions = await R.create_schema("sqlite+aiosqlite:///till.db")
    store = R.SqlRecordStore(sessions)

Every implementation raises on failure; callers wrap calls with
combinators.lift.catching_async to turn exceptions into Result errors.
"""

from pawpos.store._records import (
    Product,
    Variant,
    StockKind,
    DiscountType,
    PromotionScope,
    PromotionTier,
    Promotion,
    Courier,
    ShippingRate,
    Province,
    CustomerProfile,
    OrderFields,
    OrderLineFields,
    Order,
)
from pawpos.store._protocol import StoreError, RecordNotFound, RecordStore
from pawpos.store._memory import MemoryRecordStore, Notification
from pawpos.store._sqlalchemy import SqlRecordStore, create_schema, open_store

__all__ = (
    # Records
    "Product",
    "Variant",
    "StockKind",
    "DiscountType",
    "PromotionScope",
    "PromotionTier",
    "Promotion",
    "Courier",
    "ShippingRate",
    "Province",
    "CustomerProfile",
    "OrderFields",
    "OrderLineFields",
    "Order",
    # Protocol
    "StoreError",
    "RecordNotFound",
    "RecordStore",
    # Implementations
    "MemoryRecordStore",
    "Notification",
    "SqlRecordStore",
    "create_schema",
    "open_store",
)
