"""
Checkout commit — three fail-stop phases against the record store.

    match await commit_checkout(store, request):
        case Ok(receipt):
            toast(f"Order #{receipt.short_id} completed!")
        case Error(e) if e.requires_reconciliation:
            alert(e.message)       # order saved, stock partly deducted
        case Error(e):
            toast(e.message)       # nothing to undo

No retries: every failure is reported once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kungfu import Result, Ok, Error, LazyCoroResult
from combinators import lift as L

from pawpos._types import format_idr
from pawpos.store._records import Order
from pawpos.checkout._types import (
    CheckoutRequest,
    CheckoutReceipt,
    CheckoutErrorKind,
    CheckoutError,
)
from pawpos.checkout._validate import validate_details
from pawpos.checkout._phases import verify_stock, write_order, debit_stock

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "New POS Order Placed!"


async def _notify(store: RecordStore, order: Order) -> bool:
    """Tell the back office. Failure is logged and never fails the sale."""
    result = await L.catching_async(
        lambda: store.create_notification(
            NOTIFICATION_TITLE,
            f"Order #{order.id[:8]} has been placed via POS with total amount of "
            f"{format_idr(order.fields.total_amount)}.",
            f"/admin/orders/{order.id}",
        ),
        on_error=lambda e: e,
    )
    match result:
        case Ok(_):
            return True
        case Error(exc):
            logger.warning("order %s saved but notification failed: %s", order.id, exc)
            return False


def commit_checkout(
    store: RecordStore,
    request: CheckoutRequest,
) -> LazyCoroResult[CheckoutReceipt, CheckoutError]:
    """
    Verify stock, write the order, debit stock. No phase starts until the
    previous one fully succeeded.
    """
    if request.cart.is_empty:
        return L.fail(CheckoutError(CheckoutErrorKind.EMPTY_CART, "Cart is empty"))
    match validate_details(request.details):
        case Error(e):
            return L.fail(e)
        case Ok(_):
            pass

    cart = request.cart

    async def run() -> Result[CheckoutReceipt, CheckoutError]:
        logger.info("checkout phase 1: verifying stock for %d lines", len(cart.lines))
        match await verify_stock(store, cart):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        logger.info("checkout phase 2: writing order")
        match await write_order(store, request):
            case Error(e):
                return Error(e)
            case Ok(order):
                pass

        logger.info("checkout phase 3: debiting stock for order %s", order.id)
        match await debit_stock(store, order, cart):
            case Error(e):
                return Error(e)
            case Ok(debits):
                pass

        notified = await _notify(store, order)
        logger.info(
            "sale complete: order %s total %s via %s",
            order.id,
            order.fields.total_amount,
            order.fields.payment_method,
        )
        return Ok(CheckoutReceipt(order=order, debits=debits, notified=notified))

    return LazyCoroResult(run)


__all__ = ("NOTIFICATION_TITLE", "commit_checkout")
