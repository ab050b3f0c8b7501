"""
Checkout types — form, request, receipt, errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from pawpos._types import Money, OrderId, PaymentMethod
from pawpos.cart import Cart, LineKey
from pawpos.pricing import PricingResult
from pawpos.shipping import CourierSelection, Destination
from pawpos.store._records import Order

# ═══════════════════════════════════════════════════════════════════════════════
# Inputs
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutDetails:
    """Recipient and shipping form filled in before payment."""

    recipient_name: str = ""
    recipient_phone: str = ""
    destination: Destination | None = None
    recipient_address: str = ""
    courier: CourierSelection | None = None
    customer_notes: str = ""


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """Everything the commit needs; prices come from the cart, never re-derived."""

    cart: Cart
    pricing: PricingResult
    details: CheckoutDetails
    payment_method: PaymentMethod
    courier_name: str
    cashier_id: str | None = None
    cashier_name: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Outcome
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Shortfall:
    key: LineKey
    display_name: str
    requested: int
    available: int

    @property
    def message(self) -> str:
        return f"Not enough stock for {self.display_name}. Only {self.available} available."


@dataclass(frozen=True, slots=True)
class StockDebit:
    key: LineKey
    display_name: str
    before: int
    after: int


@dataclass(frozen=True, slots=True)
class CheckoutReceipt:
    order: Order
    debits: tuple[StockDebit, ...]
    notified: bool

    @property
    def short_id(self) -> str:
        return self.order.id[:8]

    @property
    def total(self) -> Money:
        return self.order.fields.total_amount


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    VALIDATION = auto()
    EMPTY_CART = auto()
    STOCK_SHORTFALL = auto()
    STOCK_CHECK_FAILED = auto()
    ORDER_WRITE_FAILED = auto()
    PARTIAL_COMMIT = auto()


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    Why a commit stopped, and what it left behind.

    Before any write: order_id is None and nothing needs undoing.
    PARTIAL_COMMIT: the order exists and `debited` lines lost stock while
    `pending` lines did not; an operator has to reconcile by hand.
    """

    kind: CheckoutErrorKind
    message: str
    order_id: OrderId | None = None
    shortfalls: tuple[Shortfall, ...] = ()
    debited: tuple[StockDebit, ...] = ()
    pending: tuple[LineKey, ...] = ()

    @property
    def writes_started(self) -> bool:
        return self.order_id is not None

    @property
    def requires_reconciliation(self) -> bool:
        return self.kind is CheckoutErrorKind.PARTIAL_COMMIT


__all__ = (
    "CheckoutDetails",
    "CheckoutRequest",
    "Shortfall",
    "StockDebit",
    "CheckoutReceipt",
    "CheckoutErrorKind",
    "CheckoutError",
)
