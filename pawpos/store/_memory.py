"""
In-memory record store.

Dict-backed, used by tests and the demo till. Every call is recorded, and
any operation can be made to fail, to exercise the commit error paths:

    store = MemoryRecordStore()
    store.add_product(Product("p1", "Kibble 1kg", Decimal(15000), stock_quantity=10))

    store.fail("set_stock", after=1)            # second debit raises
    store.on("get_stock", lambda kind, id: ...)  # simulate another till
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from pawpos._types import ProductId, PromotionId, CourierId, DestinationId, OrderId
from pawpos.store._protocol import StoreError, RecordNotFound
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
# Fault Injection
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _Fault:
    after: int
    error: Exception
    when: Callable[..., bool] | None
    seen: int = 0

    def trips(self, args: tuple[object, ...]) -> bool:
        if self.when is not None and not self.when(*args):
            return False
        self.seen += 1
        return self.seen > self.after


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    message: str
    link: str


# ═══════════════════════════════════════════════════════════════════════════════
# MemoryRecordStore
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryRecordStore:
    """RecordStore over plain dicts."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self.products: dict[ProductId, Product] = {}
        self.variants: dict[str, Variant] = {}
        self.promotions: dict[PromotionId, Promotion] = {}
        self.tiers: list[PromotionTier] = []
        self.couriers: dict[CourierId, Courier] = {}
        self.rates: dict[tuple[CourierId, DestinationId], ShippingRate] = {}
        self.provinces: dict[DestinationId, Province] = {}
        self.profiles: list[CustomerProfile] = []
        self.orders: dict[OrderId, Order] = {}
        self.notifications: list[Notification] = []
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self._faults: dict[str, _Fault] = {}
        self._hooks: dict[str, Callable[..., None]] = {}

    # ─── seeding ──────────────────────────────────────────────────────────────

    def add_product(self, product: Product, *variants: Variant) -> None:
        self.products[product.id] = product
        for v in variants:
            self.variants[v.id] = v

    def add_promotion(self, promotion: Promotion) -> None:
        self.promotions[promotion.id] = promotion
        self.tiers.extend(promotion.tiers)

    def add_courier(self, courier: Courier, *rates: ShippingRate) -> None:
        self.couriers[courier.id] = courier
        for r in rates:
            self.rates[(r.courier_id, r.destination_id)] = r

    def add_province(self, *provinces: Province) -> None:
        for p in provinces:
            self.provinces[p.id] = p

    def add_profile(self, *profiles: CustomerProfile) -> None:
        self.profiles.extend(profiles)

    # ─── test hooks ───────────────────────────────────────────────────────────

    def fail(
        self,
        op: str,
        error: Exception | None = None,
        *,
        after: int = 0,
        when: Callable[..., bool] | None = None,
    ) -> None:
        """Make `op` raise once `after` matching calls have succeeded."""
        self._faults[op] = _Fault(
            after=after,
            error=error or StoreError(f"{op} unavailable"),
            when=when,
        )

    def heal(self, op: str | None = None) -> None:
        if op is None:
            self._faults.clear()
        else:
            self._faults.pop(op, None)

    def on(self, op: str, hook: Callable[..., None]) -> None:
        """Run `hook(*args)` before every call of `op`."""
        self._hooks[op] = hook

    def called(self, op: str) -> list[tuple[object, ...]]:
        return [args for name, args in self.calls if name == op]

    def stock_of(self, kind: StockKind, id: str) -> int:
        if kind is StockKind.PRODUCT:
            return self.products[id].stock_quantity
        return self.variants[id].stock_quantity

    def _enter(self, op: str, *args: object) -> None:
        self.calls.append((op, args))
        hook = self._hooks.get(op)
        if hook is not None:
            hook(*args)
        fault = self._faults.get(op)
        if fault is not None and fault.trips(args):
            raise fault.error

    # ─── catalog ──────────────────────────────────────────────────────────────

    async def list_active_products(self) -> list[Product]:
        self._enter("list_active_products")
        active = [p for p in self.products.values() if p.is_active]
        return sorted(active, key=lambda p: p.name)

    async def list_variants_for_products(
        self, product_ids: Sequence[ProductId]
    ) -> list[Variant]:
        self._enter("list_variants_for_products", tuple(product_ids))
        wanted = set(product_ids)
        return [v for v in self.variants.values() if v.product_id in wanted]

    async def get_stock(self, kind: StockKind, id: str) -> int:
        self._enter("get_stock", kind, id)
        try:
            return self.stock_of(kind, id)
        except KeyError:
            raise RecordNotFound(kind.value, id) from None

    async def set_stock(self, kind: StockKind, id: str, new_value: int) -> None:
        self._enter("set_stock", kind, id, new_value)
        if kind is StockKind.PRODUCT:
            if id not in self.products:
                raise RecordNotFound("product", id)
            self.products[id] = replace(self.products[id], stock_quantity=new_value)
        else:
            if id not in self.variants:
                raise RecordNotFound("variant", id)
            self.variants[id] = replace(self.variants[id], stock_quantity=new_value)

    # ─── promotions ───────────────────────────────────────────────────────────

    async def list_active_promotions(
        self, *, pos_only: bool, now: datetime
    ) -> list[Promotion]:
        self._enter("list_active_promotions", pos_only, now)
        return [
            p
            for p in self.promotions.values()
            if p.is_active
            and (p.available_for_pos or not pos_only)
            and (p.start_date is None or p.start_date <= now)
            and (p.end_date is None or p.end_date >= now)
        ]

    async def find_promotion_by_code(self, code: str) -> Promotion | None:
        self._enter("find_promotion_by_code", code)
        wanted = code.strip().casefold()
        for p in self.promotions.values():
            if p.code.casefold() == wanted and p.is_active and p.available_for_pos:
                return p
        return None

    async def list_promotion_tiers(
        self, promotion_ids: Sequence[PromotionId]
    ) -> list[PromotionTier]:
        self._enter("list_promotion_tiers", tuple(promotion_ids))
        wanted = set(promotion_ids)
        return [t for t in self.tiers if t.promotion_id in wanted]

    # ─── shipping ─────────────────────────────────────────────────────────────

    async def get_courier(self, courier_id: CourierId) -> Courier | None:
        self._enter("get_courier", courier_id)
        return self.couriers.get(courier_id)

    async def list_active_couriers(self) -> list[Courier]:
        self._enter("list_active_couriers")
        active = [c for c in self.couriers.values() if c.is_active]
        return sorted(active, key=lambda c: c.courier_name)

    async def list_destinations(self) -> list[Province]:
        self._enter("list_destinations")
        active = [p for p in self.provinces.values() if p.is_active]
        return sorted(active, key=lambda p: p.province_name)

    async def get_shipping_rate(
        self, courier_id: CourierId, destination_id: DestinationId
    ) -> ShippingRate | None:
        self._enter("get_shipping_rate", courier_id, destination_id)
        return self.rates.get((courier_id, destination_id))

    # ─── customers ────────────────────────────────────────────────────────────

    async def search_customer_profiles(
        self, query: str, limit: int = 10
    ) -> list[CustomerProfile]:
        self._enter("search_customer_profiles", query, limit)
        wanted = query.casefold()
        found = [
            p
            for p in self.profiles
            if wanted in (p.user_name or "").casefold() or wanted in (p.user_phone or "").casefold()
        ]
        return found[:limit]

    # ─── orders ───────────────────────────────────────────────────────────────

    async def create_order(self, fields: OrderFields) -> Order:
        self._enter("create_order", fields)
        order = Order(id=str(uuid.uuid4()), fields=fields, created_at=self._clock())
        self.orders[order.id] = order
        return order

    async def create_order_lines(
        self, order_id: OrderId, lines: Sequence[OrderLineFields]
    ) -> None:
        self._enter("create_order_lines", order_id, tuple(lines))
        if order_id not in self.orders:
            raise RecordNotFound("order", order_id)
        self.orders[order_id] = replace(self.orders[order_id], lines=tuple(lines))

    async def create_notification(self, title: str, message: str, link: str) -> None:
        self._enter("create_notification", title, message, link)
        self.notifications.append(Notification(title, message, link))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("MemoryRecordStore", "Notification")
