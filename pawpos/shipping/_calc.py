"""
Shipping calculator — weight tiers over a per-courier, per-destination rate.

    match await compute_shipping(store, RatedCourier(3), destination_id=11, grams=1200):
        case Ok(None):
            ...  # no destination yet, leave blank
        case Ok(quote):
            quote.cost        # base_rate * 2
        case Error(e):
            toast(e.message)  # cashier types the cost
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult
from combinators import lift as L

from pawpos._types import Money, DestinationId, ZERO
from pawpos.shipping._types import (
    PICKUP_NAME,
    Pickup,
    ManualCourier,
    RatedCourier,
    CourierSelection,
    ShippingQuote,
    ShippingErrorKind,
    ShippingError,
)
from pawpos.store._records import Courier, ShippingRate

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)

GRAMS_PER_KG = 1000

# ═══════════════════════════════════════════════════════════════════════════════
# Weight Tiers
# ═══════════════════════════════════════════════════════════════════════════════


def billed_kilograms(grams: int) -> int | None:
    """Whole kilograms charged, rounded up; None below 1 kg (flat rate)."""
    if grams < 0:
        raise ValueError(f"weight cannot be negative: {grams}")
    if grams < GRAMS_PER_KG:
        return None
    return -(-grams // GRAMS_PER_KG)


def tiered_cost(base_rate: Money, grams: int) -> Money:
    """
    Under 1 kg: the base rate. From 1 kg: base rate per started kilogram.

        tiered_cost(20000, 999)   # 20000
        tiered_cost(20000, 1000)  # 20000
        tiered_cost(20000, 1001)  # 40000
    """
    kg = billed_kilograms(grams)
    return base_rate if kg is None else base_rate * Decimal(kg)


def courier_display_name(selection: CourierSelection, courier: Courier | None = None) -> str:
    """Name stored on the order's shipping_courier column."""
    match selection:
        case Pickup():
            return PICKUP_NAME
        case ManualCourier(name):
            return name.strip()
        case RatedCourier():
            return courier.courier_name if courier is not None else ""


# ═══════════════════════════════════════════════════════════════════════════════
# compute_shipping
# ═══════════════════════════════════════════════════════════════════════════════


def compute_shipping(
    store: RecordStore,
    selection: CourierSelection,
    destination_id: DestinationId | None,
    grams: int,
) -> LazyCoroResult[ShippingQuote | None, ShippingError]:
    """
    Quote shipping for the current cart weight.

    Pickup and manual couriers cost 0 without touching the store. A rated
    courier with no destination yet gives Ok(None). A missing or inactive
    courier, or a missing rate, is an Error: the cost stays blank, never 0.
    """
    match selection:
        case Pickup() | ManualCourier():
            return L.pure(ShippingQuote(ZERO, courier_display_name(selection)))
    if destination_id is None:
        return L.pure(None)
    courier_id = selection.courier_id

    def unavailable(exc: Exception) -> ShippingError:
        logger.warning("shipping lookup failed: %s", exc)
        return ShippingError(ShippingErrorKind.STORE_UNAVAILABLE, "Error calculating shipping cost")

    def check_active(courier: Courier | None) -> LazyCoroResult[Courier, ShippingError]:
        if courier is None:
            return L.fail(
                ShippingError(ShippingErrorKind.COURIER_NOT_FOUND, "Selected courier not found")
            )
        if not courier.is_active:
            return L.fail(
                ShippingError(
                    ShippingErrorKind.COURIER_INACTIVE,
                    "Selected courier is not active",
                    courier.courier_name,
                )
            )
        return L.pure(courier)

    def quote(courier: Courier) -> LazyCoroResult[ShippingQuote, ShippingError]:
        def from_rate(rate: ShippingRate | None) -> LazyCoroResult[ShippingQuote, ShippingError]:
            if rate is None:
                logger.warning(
                    "no shipping rate for courier %s to destination %s",
                    courier.id,
                    destination_id,
                )
                return L.fail(
                    ShippingError(
                        ShippingErrorKind.NO_RATE_CONFIGURED,
                        "No shipping rate configured for this courier and province. "
                        "Please enter manually.",
                        courier.courier_name,
                    )
                )
            return L.pure(
                ShippingQuote(
                    cost=tiered_cost(rate.cost, grams),
                    courier_name=courier.courier_name,
                    base_rate=rate.cost,
                    billed_kg=billed_kilograms(grams),
                    estimated_days=rate.estimated_days,
                )
            )

        return L.catching_async(
            lambda: store.get_shipping_rate(courier.id, destination_id),
            on_error=unavailable,
        ).then(from_rate)

    return (
        L.catching_async(lambda: store.get_courier(courier_id), on_error=unavailable)
        .then(check_active)
        .then(quote)
    )


__all__ = (
    "GRAMS_PER_KG",
    "billed_kilograms",
    "tiered_cost",
    "courier_display_name",
    "compute_shipping",
)
