"""
Pricing aggregator — subtotal, discount and shipping into a payable total.

recompute_pricing is called after every cart or promotion change:

    pricing = recompute_pricing(cart, promotions, now, shipping_cost=quote.cost)
    pricing.total == pricing.subtotal - pricing.discount + pricing.shipping_cost
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from kungfu import Ok, Error

from pawpos._types import Money, PaymentMethod, ZERO
from pawpos.cart import Cart
from pawpos.config import PaymentSettings
from pawpos.promotions import (
    AppliedPromotion,
    PromoCodeError,
    applied_discount,
    best_promotion,
    check_promotion,
)
from pawpos.store._records import Promotion
from pawpos.pricing._types import PricingResult

logger = logging.getLogger(__name__)


def _select(
    cart: Cart,
    promotions: Iterable[Promotion],
    now: datetime,
    manual: Promotion | None,
) -> tuple[AppliedPromotion | None, PromoCodeError | None]:
    if manual is not None and not cart.is_empty:
        match check_promotion(manual, cart, now, manual=True):
            case Ok(applied):
                return applied, None
            case Error(e):
                # Code no longer fits the cart; fall back to the automatic pick.
                logger.info("manual promotion %s dropped: %s", manual.code, e.message)
                return best_promotion(promotions, cart, now), e
    return best_promotion(promotions, cart, now), None


def recompute_pricing(
    cart: Cart,
    promotions: Iterable[Promotion],
    now: datetime,
    *,
    manual: Promotion | None = None,
    shipping_cost: Money | None = None,
) -> PricingResult:
    """
    Derive the full price breakdown from the cart.

    A manual promotion replaces the automatic best-of while it still
    qualifies. The discount never exceeds the subtotal.
    """
    subtotal = cart.subtotal
    promotion, rejected = _select(cart, promotions, now, manual)
    discount = applied_discount(promotion.discount, subtotal) if promotion else ZERO

    free_shipping = promotion is not None and promotion.free_shipping
    charged = ZERO if free_shipping or shipping_cost is None else shipping_cost

    result = PricingResult(
        subtotal=subtotal,
        discount=discount,
        shipping_quoted=shipping_cost,
        shipping_cost=charged,
        total=subtotal - discount + charged,
        total_weight_grams=cart.total_weight_grams,
        total_quantity=cart.total_quantity,
        promotion=promotion,
        manual_rejected=rejected,
    )
    logger.debug(
        "priced %d lines: subtotal=%s discount=%s shipping=%s total=%s",
        len(cart.lines),
        result.subtotal,
        result.discount,
        result.shipping_cost,
        result.total,
    )
    return result


# ═══════════════════════════════════════════════════════════════════════════════
# Cash Handling
# ═══════════════════════════════════════════════════════════════════════════════


def change_due(total: Money, cash_received: Money) -> Money:
    """Change to hand back; negative while the customer still owes."""
    return cash_received - total


def can_complete_sale(
    total: Money,
    method: PaymentMethod,
    cash_received: Money | None = None,
    payment: PaymentSettings | None = None,
) -> bool:
    """Cash needs cash_received >= total; other methods need to be enabled."""
    if method is PaymentMethod.CASH:
        return cash_received is not None and cash_received >= total
    return payment is None or payment.is_enabled(method)


__all__ = ("recompute_pricing", "change_due", "can_complete_sale")
