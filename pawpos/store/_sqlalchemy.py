"""
SQLAlchemy record store.

    engine, sessions = await create_schema("sqlite+aiosqlite:///till.db")
    store = SqlRecordStore(sessions)

    engine, store = await open_store(TerminalSettings.from_env())

Each method opens its own session and runs one statement. There is no
transaction spanning calls, so the commit protocol sees the same guarantees
as it would over a remote query API.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, cast

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pawpos._types import ProductId, PromotionId, CourierId, DestinationId, OrderId, money
from pawpos.config import TerminalSettings
from pawpos.store._protocol import RecordNotFound
from pawpos.store._records import (
    Product,
    Variant,
    StockKind,
    DiscountType,
    PromotionScope,
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
from pawpos.store._tables import (
    Base,
    ProductRow,
    VariantRow,
    PromotionRow,
    PromotionTierRow,
    CourierRow,
    ShippingRateRow,
    ProvinceRow,
    ProfileRow,
    OrderRow,
    OrderItemRow,
    NotificationRow,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Row → Record
# ═══════════════════════════════════════════════════════════════════════════════


def _aware(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo; stored values are UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _product(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        base_price=money(row.base_price),
        stock_quantity=row.stock_quantity,
        unit_weight_grams=row.unit_weight_grams,
        has_variants=row.has_variants,
        is_active=row.is_active,
        category_id=row.category_id,
    )


def _variant(row: VariantRow) -> Variant:
    return Variant(
        id=row.id,
        product_id=row.product_id,
        variant_name=row.variant_name,
        price_adjustment=money(row.price_adjustment),
        stock_quantity=row.stock_quantity,
        weight_grams=row.weight_grams,
    )


def _promotion(row: PromotionRow) -> Promotion:
    return Promotion(
        id=row.id,
        code=row.code,
        discount_type=DiscountType(row.discount_type),
        discount_value=money(row.discount_value),
        min_purchase_amount=(
            money(row.min_purchase_amount) if row.min_purchase_amount is not None else None
        ),
        start_date=_aware(row.start_date),
        end_date=_aware(row.end_date),
        is_active=row.is_active,
        available_for_pos=row.available_for_pos,
        applies_to=PromotionScope(row.applies_to),
        product_ids=frozenset(row.product_ids or ()),
        free_shipping=row.free_shipping,
        buy_quantity=row.buy_quantity,
        get_quantity=row.get_quantity,
        description=row.description,
    )


def _tier(row: PromotionTierRow) -> PromotionTier:
    return PromotionTier(
        promotion_id=row.promotion_id,
        min_quantity=row.min_quantity,
        discount_percentage=money(row.discount_percentage),
    )


def _profile(row: ProfileRow) -> CustomerProfile:
    return CustomerProfile(
        id=row.id,
        user_name=row.user_name,
        user_phone=row.user_phoneno,
        user_email=row.user_email,
        recipient_name=row.recipient_name,
        recipient_phone=row.recipient_phoneno,
        recipient_address_line1=row.recipient_address_line1,
        recipient_province_id=row.recipient_province_id,
        address_line1=row.address_line1,
        province_id=row.province_id,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SqlRecordStore
# ═══════════════════════════════════════════════════════════════════════════════


class SqlRecordStore:
    """RecordStore over an async SQLAlchemy engine."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    async def _scalars(self, stmt: Any) -> list[Any]:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _write(self, stmt: Any) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                result = cast(CursorResult[Any], await session.execute(stmt))
                return result.rowcount

    # ─── catalog ──────────────────────────────────────────────────────────────

    async def list_active_products(self) -> list[Product]:
        rows = await self._scalars(
            select(ProductRow).where(ProductRow.is_active.is_(True)).order_by(ProductRow.name)
        )
        return [_product(r) for r in rows]

    async def list_variants_for_products(
        self, product_ids: Sequence[ProductId]
    ) -> list[Variant]:
        if not product_ids:
            return []
        rows = await self._scalars(
            select(VariantRow)
            .where(VariantRow.product_id.in_(list(product_ids)))
            .order_by(VariantRow.variant_name)
        )
        return [_variant(r) for r in rows]

    async def get_stock(self, kind: StockKind, id: str) -> int:
        table = ProductRow if kind is StockKind.PRODUCT else VariantRow
        rows = await self._scalars(select(table.stock_quantity).where(table.id == id))
        if not rows:
            raise RecordNotFound(table.__tablename__, id)
        return int(rows[0])

    async def set_stock(self, kind: StockKind, id: str, new_value: int) -> None:
        table = ProductRow if kind is StockKind.PRODUCT else VariantRow
        count = await self._write(
            update(table).where(table.id == id).values(stock_quantity=new_value)
        )
        if count == 0:
            raise RecordNotFound(table.__tablename__, id)

    # ─── promotions ───────────────────────────────────────────────────────────

    async def list_active_promotions(
        self, *, pos_only: bool, now: datetime
    ) -> list[Promotion]:
        stmt = select(PromotionRow).where(PromotionRow.is_active.is_(True))
        if pos_only:
            stmt = stmt.where(PromotionRow.available_for_pos.is_(True))
        rows = await self._scalars(stmt.order_by(PromotionRow.code))
        # Date window is checked here; SQLite compares stored datetimes as text.
        promotions = [_promotion(r) for r in rows]
        return [
            p
            for p in promotions
            if (p.start_date is None or p.start_date <= now)
            and (p.end_date is None or p.end_date >= now)
        ]

    async def find_promotion_by_code(self, code: str) -> Promotion | None:
        rows = await self._scalars(
            select(PromotionRow).where(
                func.lower(PromotionRow.code) == code.strip().lower(),
                PromotionRow.is_active.is_(True),
                PromotionRow.available_for_pos.is_(True),
            )
        )
        return _promotion(rows[0]) if rows else None

    async def list_promotion_tiers(
        self, promotion_ids: Sequence[PromotionId]
    ) -> list[PromotionTier]:
        if not promotion_ids:
            return []
        rows = await self._scalars(
            select(PromotionTierRow)
            .where(PromotionTierRow.promotion_id.in_(list(promotion_ids)))
            .order_by(PromotionTierRow.min_quantity)
        )
        return [_tier(r) for r in rows]

    # ─── shipping ─────────────────────────────────────────────────────────────

    async def get_courier(self, courier_id: CourierId) -> Courier | None:
        rows = await self._scalars(select(CourierRow).where(CourierRow.id == courier_id))
        if not rows:
            return None
        return Courier(id=rows[0].id, courier_name=rows[0].courier_name, is_active=rows[0].is_active)

    async def list_active_couriers(self) -> list[Courier]:
        rows = await self._scalars(
            select(CourierRow)
            .where(CourierRow.is_active.is_(True))
            .order_by(CourierRow.courier_name)
        )
        return [Courier(id=r.id, courier_name=r.courier_name, is_active=r.is_active) for r in rows]

    async def list_destinations(self) -> list[Province]:
        rows = await self._scalars(
            select(ProvinceRow)
            .where(ProvinceRow.is_active.is_(True))
            .order_by(ProvinceRow.province_name)
        )
        return [Province(id=r.id, province_name=r.province_name, is_active=r.is_active) for r in rows]

    async def get_shipping_rate(
        self, courier_id: CourierId, destination_id: DestinationId
    ) -> ShippingRate | None:
        rows = await self._scalars(
            select(ShippingRateRow).where(
                ShippingRateRow.courier_id == courier_id,
                ShippingRateRow.province_id == destination_id,
            )
        )
        if not rows:
            return None
        row = rows[0]
        return ShippingRate(
            courier_id=row.courier_id,
            destination_id=row.province_id,
            cost=money(row.cost),
            estimated_days=row.estimated_days,
        )

    # ─── customers ────────────────────────────────────────────────────────────

    async def search_customer_profiles(
        self, query: str, limit: int = 10
    ) -> list[CustomerProfile]:
        rows = await self._scalars(
            select(ProfileRow)
            .where(
                or_(
                    ProfileRow.user_name.icontains(query, autoescape=True),
                    ProfileRow.user_phoneno.icontains(query, autoescape=True),
                )
            )
            .order_by(ProfileRow.user_name)
            .limit(limit)
        )
        return [_profile(r) for r in rows]

    # ─── orders ───────────────────────────────────────────────────────────────

    async def create_order(self, fields: OrderFields) -> Order:
        order = Order(id=str(uuid.uuid4()), fields=fields, created_at=self._clock())
        await self._write(
            insert(OrderRow).values(
                id=order.id,
                created_at=order.created_at,
                source=fields.source,
                status=fields.status,
                cashier_id=fields.cashier_id,
                cashier_name=fields.cashier_name,
                subtotal=fields.subtotal,
                discount_amount=fields.discount_amount,
                shipping_fee=fields.shipping_fee,
                total_amount=fields.total_amount,
                payment_method=fields.payment_method,
                promotion_code=fields.promotion_code,
                recipient_name=fields.recipient_name,
                recipient_phone=fields.recipient_phone,
                shipping_address=fields.recipient_address,
                shipping_province_id=fields.destination_id,
                shipping_province=fields.destination_name,
                shipping_courier=fields.shipping_courier,
                shipping_weight_grams=fields.shipping_weight_grams,
                customer_notes=fields.customer_notes,
            )
        )
        return order

    async def create_order_lines(
        self, order_id: OrderId, lines: Sequence[OrderLineFields]
    ) -> None:
        if not lines:
            return
        await self._write(
            insert(OrderItemRow).values(
                [
                    {
                        "order_id": order_id,
                        "product_id": line.product_id,
                        "variant_id": line.variant_id,
                        "quantity": line.quantity,
                        "price_at_purchase": line.price_at_purchase,
                    }
                    for line in lines
                ]
            )
        )

    async def create_notification(self, title: str, message: str, link: str) -> None:
        await self._write(
            insert(NotificationRow).values(
                title=title,
                message=message,
                link=link,
                is_read=False,
                created_at=self._clock(),
            )
        )

    # ─── seeding ──────────────────────────────────────────────────────────────

    async def add_product(self, product: Product, *variants: Variant) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(
                    ProductRow(
                        id=product.id,
                        name=product.name,
                        base_price=product.base_price,
                        stock_quantity=product.stock_quantity,
                        unit_weight_grams=product.unit_weight_grams,
                        has_variants=product.has_variants,
                        is_active=product.is_active,
                        category_id=product.category_id,
                    )
                )
                await session.flush()
                session.add_all(
                    VariantRow(
                        id=v.id,
                        product_id=v.product_id,
                        variant_name=v.variant_name,
                        price_adjustment=v.price_adjustment,
                        stock_quantity=v.stock_quantity,
                        weight_grams=v.weight_grams,
                    )
                    for v in variants
                )

    async def add_promotion(self, promotion: Promotion) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(
                    PromotionRow(
                        id=promotion.id,
                        code=promotion.code,
                        discount_type=promotion.discount_type.value,
                        discount_value=promotion.discount_value,
                        min_purchase_amount=promotion.min_purchase_amount,
                        start_date=promotion.start_date,
                        end_date=promotion.end_date,
                        is_active=promotion.is_active,
                        available_for_pos=promotion.available_for_pos,
                        applies_to=promotion.applies_to.value,
                        product_ids=sorted(promotion.product_ids),
                        free_shipping=promotion.free_shipping,
                        buy_quantity=promotion.buy_quantity,
                        get_quantity=promotion.get_quantity,
                        description=promotion.description,
                    )
                )
                await session.flush()
                session.add_all(
                    PromotionTierRow(
                        promotion_id=t.promotion_id,
                        min_quantity=t.min_quantity,
                        discount_percentage=t.discount_percentage,
                    )
                    for t in promotion.tiers
                )

    async def add_courier(self, courier: Courier, *rates: ShippingRate) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(
                    CourierRow(
                        id=courier.id,
                        courier_name=courier.courier_name,
                        is_active=courier.is_active,
                    )
                )
                await session.flush()
                session.add_all(
                    ShippingRateRow(
                        courier_id=r.courier_id,
                        province_id=r.destination_id,
                        cost=r.cost,
                        estimated_days=r.estimated_days,
                    )
                    for r in rates
                )

    async def add_province(self, *provinces: Province) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add_all(
                    ProvinceRow(id=p.id, province_name=p.province_name, is_active=p.is_active)
                    for p in provinces
                )

    async def add_profile(self, *profiles: CustomerProfile) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add_all(
                    ProfileRow(
                        id=p.id,
                        user_name=p.user_name,
                        user_phoneno=p.user_phone,
                        user_email=p.user_email,
                        recipient_name=p.recipient_name,
                        recipient_phoneno=p.recipient_phone,
                        recipient_address_line1=p.recipient_address_line1,
                        recipient_province_id=p.recipient_province_id,
                        address_line1=p.address_line1,
                        province_id=p.province_id,
                    )
                    for p in profiles
                )

    async def order_lines(self, order_id: OrderId) -> list[OrderLineFields]:
        rows = await self._scalars(
            select(OrderItemRow).where(OrderItemRow.order_id == order_id).order_by(OrderItemRow.id)
        )
        return [
            OrderLineFields(
                product_id=r.product_id,
                variant_id=r.variant_id,
                quantity=r.quantity,
                price_at_purchase=money(r.price_at_purchase),
            )
            for r in rows
        ]


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_schema(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create all tables and return (engine, session_factory)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return engine, async_sessionmaker(engine, expire_on_commit=False)


async def open_store(
    settings: TerminalSettings,
    clock: Callable[[], datetime] | None = None,
) -> tuple[AsyncEngine, SqlRecordStore]:
    """Store over `settings.database_url`. Dispose the engine at shutdown."""
    engine, sessions = await create_schema(settings.database_url)
    logger.info("record store opened at %s", engine.url.render_as_string(hide_password=True))
    return engine, SqlRecordStore(sessions, clock=clock)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("SqlRecordStore", "create_schema", "open_store")
