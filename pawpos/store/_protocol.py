"""
Record store protocol — the till's only view of the database.

Implementations raise on failure; the till converts exceptions into
phase errors at each call site. No transactions or locks are assumed:
every method is one independent read or write.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from pawpos._types import ProductId, PromotionId, CourierId, DestinationId, OrderId
from pawpos.store._records import (
    Product,
    Variant,
    StockKind,
    Promotion,
    PromotionTier,
    Courier,
    ShippingRate,
    Province,
    CustomerProfile,
    OrderFields,
    OrderLineFields,
    Order,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Store Errors
# ═══════════════════════════════════════════════════════════════════════════════


class StoreError(Exception):
    """Record store could not complete a call."""


class RecordNotFound(StoreError):
    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity}:{key} not found")
        self.entity = entity
        self.key = key


# ═══════════════════════════════════════════════════════════════════════════════
# RecordStore Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class RecordStore(Protocol):
    """
    Generic query layer over products, variants, promotions, rates and orders.

    Example — a thin adapter over an HTTP query client:

        class RestStore:
            async def get_stock(self, kind: StockKind, id: str) -> int:
                table = "products" if kind is StockKind.PRODUCT else "product_variants"
                row = await self.client.select_one(table, id=id, columns=["stock_quantity"])
                if row is None:
                    raise RecordNotFound(table, id)
                return row["stock_quantity"]
    """

    async def list_active_products(self) -> list[Product]:
        """All products with is_active set, ordered by name."""
        ...

    async def list_variants_for_products(
        self, product_ids: Sequence[ProductId]
    ) -> list[Variant]:
        """All variants of the given products, including zero-stock ones."""
        ...

    async def get_stock(self, kind: StockKind, id: str) -> int:
        """Current stock of one product or variant. Raises RecordNotFound."""
        ...

    async def set_stock(self, kind: StockKind, id: str, new_value: int) -> None:
        """Overwrite stock of one product or variant."""
        ...

    async def list_active_promotions(
        self, *, pos_only: bool, now: datetime
    ) -> list[Promotion]:
        """Active promotions whose date window contains now."""
        ...

    async def find_promotion_by_code(self, code: str) -> Promotion | None:
        """Active, POS-available promotion with this code (case-insensitive)."""
        ...

    async def list_promotion_tiers(
        self, promotion_ids: Sequence[PromotionId]
    ) -> list[PromotionTier]:
        """Buy-more-save-more tiers for the given promotions."""
        ...

    async def get_courier(self, courier_id: CourierId) -> Courier | None:
        ...

    async def list_active_couriers(self) -> list[Courier]:
        """Active couriers ordered by name."""
        ...

    async def list_destinations(self) -> list[Province]:
        """Active provinces ordered by name."""
        ...

    async def get_shipping_rate(
        self, courier_id: CourierId, destination_id: DestinationId
    ) -> ShippingRate | None:
        ...

    async def search_customer_profiles(
        self, query: str, limit: int = 10
    ) -> list[CustomerProfile]:
        """Profiles whose user name or phone contains query (case-insensitive)."""
        ...

    async def create_order(self, fields: OrderFields) -> Order:
        ...

    async def create_order_lines(
        self, order_id: OrderId, lines: Sequence[OrderLineFields]
    ) -> None:
        ...

    async def create_notification(self, title: str, message: str, link: str) -> None:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("StoreError", "RecordNotFound", "RecordStore")
