"""
Commit phases — verify, persist, debit.

Each phase is a lazy computation that either succeeds or stops with a
CheckoutError. Nothing is compensated: a failure leaves earlier writes in
place and says so on the error.

Stock is read and written per line with no lock. Another till can sell
between a phase 1 read and the phase 3 write; the debit re-reads stock
right before writing but does not close that window.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult
from combinators import traverse, lift as L

from pawpos.cart import Cart, CartLine, BaseProduct, VariantOf
from pawpos.store._protocol import RecordNotFound
from pawpos.store._records import (
    StockKind,
    Order,
    OrderFields,
    OrderLineFields,
)
from pawpos.checkout._types import (
    CheckoutRequest,
    Shortfall,
    StockDebit,
    CheckoutErrorKind,
    CheckoutError,
)

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)


def stock_ref(line: CartLine) -> tuple[StockKind, str]:
    """Which stock pool a line draws from."""
    match line.selection:
        case VariantOf(variant=variant):
            return StockKind.VARIANT, variant.id
        case BaseProduct(product=product):
            return StockKind.PRODUCT, product.id


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 1 — Stock re-verification
# ═══════════════════════════════════════════════════════════════════════════════


def verify_stock(store: RecordStore, cart: Cart) -> LazyCoroResult[None, CheckoutError]:
    """Re-read live stock for every line. Any shortfall stops before a write."""

    def read(line: CartLine) -> LazyCoroResult[tuple[CartLine, int], CheckoutError]:
        kind, id = stock_ref(line)

        async def get() -> tuple[CartLine, int]:
            try:
                return line, await store.get_stock(kind, id)
            except RecordNotFound:
                return line, 0

        return L.catching_async(
            get,
            on_error=lambda e: CheckoutError(
                CheckoutErrorKind.STOCK_CHECK_FAILED,
                f"Failed to verify stock for {line.display_name}",
            ),
        )

    def judge(readings: list[tuple[CartLine, int]]) -> LazyCoroResult[None, CheckoutError]:
        shortfalls = tuple(
            Shortfall(line.key, line.display_name, line.quantity, available)
            for line, available in readings
            if available < line.quantity
        )
        if not shortfalls:
            return L.pure(None)

        for s in shortfalls:
            logger.warning(
                "stock shortfall for %s: requested %d, available %d",
                s.display_name,
                s.requested,
                s.available,
            )
        return L.fail(
            CheckoutError(
                CheckoutErrorKind.STOCK_SHORTFALL,
                " ".join(s.message for s in shortfalls),
                shortfalls=shortfalls,
            )
        )

    return traverse(cart.lines, read).then(judge)


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 2 — Order + lines
# ═══════════════════════════════════════════════════════════════════════════════


def order_fields(request: CheckoutRequest) -> OrderFields:
    details = request.details
    pricing = request.pricing
    return OrderFields(
        subtotal=pricing.subtotal,
        discount_amount=pricing.discount,
        shipping_fee=pricing.shipping_cost,
        total_amount=pricing.total,
        payment_method=request.payment_method.value,
        recipient_name=details.recipient_name.strip(),
        recipient_phone=details.recipient_phone.strip(),
        recipient_address=details.recipient_address.strip(),
        destination_id=details.destination.id if details.destination else None,
        destination_name=details.destination.name if details.destination else None,
        shipping_courier=request.courier_name,
        shipping_weight_grams=request.cart.total_weight_grams,
        cashier_id=request.cashier_id,
        cashier_name=request.cashier_name,
        customer_notes=details.customer_notes.strip() or None,
        promotion_code=pricing.promotion.code if pricing.promotion else None,
    )


def order_lines(cart: Cart) -> list[OrderLineFields]:
    """price_at_purchase is the unit price captured in the cart."""
    return [
        OrderLineFields(
            product_id=line.product_id,
            variant_id=line.variant_id,
            quantity=line.quantity,
            price_at_purchase=line.unit_price,
        )
        for line in cart.lines
    ]


def write_order(
    store: RecordStore,
    request: CheckoutRequest,
) -> LazyCoroResult[Order, CheckoutError]:
    """Insert the order row, then its lines. Stock is still untouched."""
    fields = order_fields(request)
    lines = order_lines(request.cart)

    def failed_order(exc: Exception) -> CheckoutError:
        logger.warning("order insert failed: %s", exc)
        return CheckoutError(CheckoutErrorKind.ORDER_WRITE_FAILED, "Failed to create order")

    def add_lines(order: Order) -> LazyCoroResult[Order, CheckoutError]:
        async def create() -> Order:
            await store.create_order_lines(order.id, lines)
            return order

        def failed_lines(exc: Exception) -> CheckoutError:
            logger.warning("order items insert failed for order %s: %s", order.id, exc)
            return CheckoutError(
                CheckoutErrorKind.ORDER_WRITE_FAILED,
                f"Failed to create order items. Order #{order.id[:8]} was saved without items "
                "and no stock was deducted.",
                order_id=order.id,
            )

        return L.catching_async(create, on_error=failed_lines)

    return L.catching_async(lambda: store.create_order(fields), on_error=failed_order).then(
        add_lines
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 3 — Stock debit
# ═══════════════════════════════════════════════════════════════════════════════


def debit_stock(
    store: RecordStore,
    order: Order,
    cart: Cart,
) -> LazyCoroResult[tuple[StockDebit, ...], CheckoutError]:
    """
    For each line in order: re-read stock, write back stock - quantity.

    Stops at the first failure. Lines already debited stay debited and the
    order stays; the error lists both sides for manual reconciliation.
    """
    done: list[StockDebit] = []
    total = len(cart.lines)

    def debit(line: CartLine) -> LazyCoroResult[StockDebit, CheckoutError]:
        kind, id = stock_ref(line)

        async def write() -> StockDebit:
            before = await store.get_stock(kind, id)
            after = before - line.quantity
            if after < 0:
                logger.warning("stock for %s went negative: %d", line.display_name, after)
            await store.set_stock(kind, id, after)
            debited = StockDebit(line.key, line.display_name, before, after)
            done.append(debited)
            return debited

        def failed(exc: Exception) -> CheckoutError:
            pending = tuple(pending_line.key for pending_line in cart.lines[len(done):])
            logger.error(
                "partial commit on order %s: stock debit failed for %s after %d of %d lines: %s",
                order.id,
                line.display_name,
                len(done),
                total,
                exc,
            )
            return CheckoutError(
                CheckoutErrorKind.PARTIAL_COMMIT,
                f"Failed to update stock for {kind.value}: {line.display_name}. "
                f"Order #{order.id[:8]} was saved and {len(done)} of {total} items "
                "had stock deducted. Reconcile stock manually.",
                order_id=order.id,
                debited=tuple(done),
                pending=pending,
            )

        return L.catching_async(write, on_error=failed)

    return traverse(cart.lines, debit).map(tuple)


__all__ = (
    "stock_ref",
    "verify_stock",
    "order_fields",
    "order_lines",
    "write_order",
    "debit_stock",
)
