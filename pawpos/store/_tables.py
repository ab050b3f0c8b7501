"""
Tables — SQLAlchemy models for the shop database.

Column names follow the back office schema; `shipping_rates.province_id`
is the till's destination id.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MONEY = Numeric(14, 2)

# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


class ProductRow(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    base_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit_weight_grams: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_variants: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    category_id: Mapped[str | None] = mapped_column(String(50), nullable=True)


class VariantRow(Base):
    __tablename__ = "product_variants"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id"), nullable=False, index=True
    )
    variant_name: Mapped[str] = mapped_column(String(200), nullable=False)
    price_adjustment: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weight_grams: Mapped[int | None] = mapped_column(Integer, nullable=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Promotions
# ═══════════════════════════════════════════════════════════════════════════════


class PromotionRow(Base):
    __tablename__ = "promotions"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    discount_type: Mapped[str] = mapped_column(String(30), nullable=False)
    discount_value: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    min_purchase_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    available_for_pos: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    applies_to: Mapped[str] = mapped_column(String(30), nullable=False, default="all_products")
    product_ids: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    free_shipping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    buy_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    get_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class PromotionTierRow(Base):
    __tablename__ = "promotion_tiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    promotion_id: Mapped[str] = mapped_column(
        ForeignKey("promotions.id"), nullable=False, index=True
    )
    min_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    discount_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Shipping
# ═══════════════════════════════════════════════════════════════════════════════


class CourierRow(Base):
    __tablename__ = "shipping_couriers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    courier_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ShippingRateRow(Base):
    __tablename__ = "shipping_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courier_id: Mapped[int] = mapped_column(
        ForeignKey("shipping_couriers.id"), nullable=False, index=True
    )
    province_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    cost: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    estimated_days: Mapped[str | None] = mapped_column(String(20), nullable=True)


class ProvinceRow(Base):
    __tablename__ = "provinces"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    province_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Customers
# ═══════════════════════════════════════════════════════════════════════════════


class ProfileRow(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    user_phoneno: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    recipient_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    recipient_phoneno: Mapped[str | None] = mapped_column(String(50), nullable=True)
    recipient_address_line1: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_province_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    address_line1: Mapped[str | None] = mapped_column(Text, nullable=True)
    province_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    cashier_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cashier_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    subtotal: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    shipping_fee: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(30), nullable=False)
    promotion_code: Mapped[str | None] = mapped_column(String(50), nullable=True)

    recipient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    recipient_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    shipping_address: Mapped[str] = mapped_column(Text, nullable=False)
    shipping_province_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    shipping_province: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shipping_courier: Mapped[str] = mapped_column(String(100), nullable=False)
    shipping_weight_grams: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    customer_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(50), nullable=False)
    variant_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_at_purchase: Mapped[Decimal] = mapped_column(MONEY, nullable=False)


class NotificationRow(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str] = mapped_column(String(200), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Base",
    "ProductRow",
    "VariantRow",
    "PromotionRow",
    "PromotionTierRow",
    "CourierRow",
    "ShippingRateRow",
    "ProvinceRow",
    "ProfileRow",
    "OrderRow",
    "OrderItemRow",
    "NotificationRow",
)
