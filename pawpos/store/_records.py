"""
Records — rows as the till reads and writes them.

Products, variants, promotions and shipping rates are owned by the back office;
the till only reads them. Orders and order lines are written once per sale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pawpos._types import (
    Money,
    ProductId,
    VariantId,
    PromotionId,
    CourierId,
    DestinationId,
    OrderId,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Product:
    id: ProductId
    name: str
    base_price: Money
    stock_quantity: int
    unit_weight_grams: int | None = None
    has_variants: bool = False
    is_active: bool = True
    category_id: str | None = None


@dataclass(frozen=True, slots=True)
class Variant:
    id: VariantId
    product_id: ProductId
    variant_name: str
    price_adjustment: Money
    stock_quantity: int
    weight_grams: int | None = None  # None -> product weight


class StockKind(Enum):
    """Which stock pool a quantity lives in."""

    PRODUCT = "product"
    VARIANT = "variant"


# ═══════════════════════════════════════════════════════════════════════════════
# Promotions
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BUY_X_GET_Y = "buy_x_get_y"
    BUY_MORE_SAVE_MORE = "buy_more_save_more"
    FREE_SHIPPING = "free_shipping"


class PromotionScope(Enum):
    ALL_PRODUCTS = "all_products"
    SPECIFIC_PRODUCTS = "specific_products"


@dataclass(frozen=True, slots=True)
class PromotionTier:
    promotion_id: PromotionId
    min_quantity: int
    discount_percentage: Money


@dataclass(frozen=True, slots=True)
class Promotion:
    id: PromotionId
    code: str
    discount_type: DiscountType
    discount_value: Money
    min_purchase_amount: Money | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True
    available_for_pos: bool = True
    applies_to: PromotionScope = PromotionScope.ALL_PRODUCTS
    product_ids: frozenset[ProductId] = frozenset()
    free_shipping: bool = False
    buy_quantity: int | None = None
    get_quantity: int | None = None
    description: str | None = None
    tiers: tuple[PromotionTier, ...] = ()

    @property
    def is_scoped(self) -> bool:
        return self.applies_to is PromotionScope.SPECIFIC_PRODUCTS


# ═══════════════════════════════════════════════════════════════════════════════
# Shipping
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Courier:
    id: CourierId
    courier_name: str
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class ShippingRate:
    courier_id: CourierId
    destination_id: DestinationId
    cost: Money
    estimated_days: str | None = None


@dataclass(frozen=True, slots=True)
class Province:
    """A shipping destination as the back office lists it."""

    id: DestinationId
    province_name: str
    is_active: bool = True


# ═══════════════════════════════════════════════════════════════════════════════
# Customers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CustomerProfile:
    """Registered customer. Recipient fields are the saved delivery contact."""

    id: str
    user_name: str | None = None
    user_phone: str | None = None
    user_email: str | None = None
    recipient_name: str | None = None
    recipient_phone: str | None = None
    recipient_address_line1: str | None = None
    recipient_province_id: DestinationId | None = None
    address_line1: str | None = None
    province_id: DestinationId | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderFields:
    """Everything captured on the order row at commit time."""

    subtotal: Money
    discount_amount: Money
    shipping_fee: Money
    total_amount: Money
    payment_method: str
    recipient_name: str
    recipient_phone: str
    recipient_address: str
    destination_id: DestinationId | None
    destination_name: str | None
    shipping_courier: str
    shipping_weight_grams: int
    cashier_id: str | None = None
    cashier_name: str | None = None
    customer_notes: str | None = None
    promotion_code: str | None = None
    source: str = "pos"
    status: str = "paid"


@dataclass(frozen=True, slots=True)
class OrderLineFields:
    product_id: ProductId
    variant_id: VariantId | None
    quantity: int
    price_at_purchase: Money


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    fields: OrderFields
    created_at: datetime
    lines: tuple[OrderLineFields, ...] = field(default=())


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
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
)
