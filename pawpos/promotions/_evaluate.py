"""
Promotion evaluator — eligibility, discount per type, best-of selection.

All functions are pure; `now` is passed in by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from kungfu import Result, Ok, Error

from pawpos._types import Money, ZERO, format_idr
from pawpos.cart import Cart
from pawpos.store._records import DiscountType, Promotion, PromotionTier
from pawpos.promotions._types import (
    AppliedPromotion,
    PromoCodeErrorKind,
    PromoCodeError,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)

# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


def has_started(promotion: Promotion, now: datetime) -> bool:
    return promotion.start_date is None or promotion.start_date <= now


def has_expired(promotion: Promotion, now: datetime) -> bool:
    return promotion.end_date is not None and promotion.end_date < now


def is_live(promotion: Promotion, now: datetime) -> bool:
    """Active, sold at the till, and inside its date window (open bounds allowed)."""
    return (
        promotion.is_active
        and promotion.available_for_pos
        and has_started(promotion, now)
        and not has_expired(promotion, now)
    )


def meets_minimum(promotion: Promotion, subtotal: Money) -> bool:
    minimum = promotion.min_purchase_amount
    return not minimum or subtotal >= minimum


def applies_to_cart(promotion: Promotion, cart: Cart) -> bool:
    if not promotion.is_scoped:
        return True
    return any(line.product_id in promotion.product_ids for line in cart.lines)


def scoped_subtotal(promotion: Promotion, cart: Cart) -> Money:
    """Subtotal of the lines the promotion covers."""
    if not promotion.is_scoped:
        return cart.subtotal
    return sum(
        (line.line_total for line in cart.lines if line.product_id in promotion.product_ids),
        ZERO,
    )


def tier_for(promotion: Promotion, quantity: int) -> PromotionTier | None:
    """Highest tier whose min_quantity the cart reaches."""
    reached = [t for t in promotion.tiers if t.min_quantity <= quantity]
    return max(reached, key=lambda t: t.min_quantity, default=None)


# ═══════════════════════════════════════════════════════════════════════════════
# Discount per Type
# ═══════════════════════════════════════════════════════════════════════════════


def _cheapest_units(cart: Cart, buy: int, get: int) -> Money:
    sets = cart.total_quantity // buy
    if sets <= 0:
        return ZERO
    prices = sorted(cart.unit_prices())
    free = min(sets * get, len(prices))
    return sum(prices[:free], ZERO)


def compute_discount(promotion: Promotion, cart: Cart) -> Money:
    """
    Hypothetical discount of one promotion on the cart, uncapped by subtotal.

    Buy-X-get-Y gives away the cheapest units in the cart. Free shipping is
    worth 0 here; its benefit is the shipping rider.
    """
    match promotion.discount_type:
        case DiscountType.PERCENTAGE:
            return scoped_subtotal(promotion, cart) * promotion.discount_value / HUNDRED
        case DiscountType.FIXED:
            return min(promotion.discount_value, scoped_subtotal(promotion, cart))
        case DiscountType.BUY_X_GET_Y:
            return _cheapest_units(
                cart,
                buy=promotion.buy_quantity or 1,
                get=promotion.get_quantity or 1,
            )
        case DiscountType.BUY_MORE_SAVE_MORE:
            tier = tier_for(promotion, cart.total_quantity)
            if tier is None:
                return ZERO
            return scoped_subtotal(promotion, cart) * tier.discount_percentage / HUNDRED
        case DiscountType.FREE_SHIPPING:
            return ZERO


def applied_discount(discount: Money, subtotal: Money) -> Money:
    """Discount actually taken off: never more than the subtotal."""
    return max(ZERO, min(discount, subtotal))


# ═══════════════════════════════════════════════════════════════════════════════
# Checks with cashier-facing reasons
# ═══════════════════════════════════════════════════════════════════════════════


def check_promotion(
    promotion: Promotion,
    cart: Cart,
    now: datetime,
    *,
    manual: bool = False,
) -> Result[AppliedPromotion, PromoCodeError]:
    """Validate one promotion against the cart; first failing rule wins."""
    if not (promotion.is_active and promotion.available_for_pos):
        return Error(
            PromoCodeError(PromoCodeErrorKind.NOT_FOUND, "Invalid or inactive promo code")
        )
    if not has_started(promotion, now):
        return Error(PromoCodeError(PromoCodeErrorKind.NOT_STARTED, "Promotion not yet started"))
    if has_expired(promotion, now):
        return Error(PromoCodeError(PromoCodeErrorKind.EXPIRED, "Promotion has expired"))
    if not meets_minimum(promotion, cart.subtotal):
        minimum = promotion.min_purchase_amount or ZERO
        return Error(
            PromoCodeError(
                PromoCodeErrorKind.MIN_PURCHASE_NOT_MET,
                f"Minimum purchase of {format_idr(minimum)} required",
            )
        )
    if not applies_to_cart(promotion, cart):
        return Error(
            PromoCodeError(
                PromoCodeErrorKind.NOT_APPLICABLE,
                "Promotion does not apply to items in cart",
            )
        )
    return Ok(AppliedPromotion(promotion, compute_discount(promotion, cart), manual=manual))


# ═══════════════════════════════════════════════════════════════════════════════
# Best-of Selection
# ═══════════════════════════════════════════════════════════════════════════════


def best_promotion(
    promotions: Iterable[Promotion],
    cart: Cart,
    now: datetime,
) -> AppliedPromotion | None:
    """
    The qualifying promotion with the strictly greatest discount.

    Ties keep the first one seen; a promotion worth nothing is never chosen.
    """
    if cart.is_empty:
        return None

    best: AppliedPromotion | None = None
    for promotion in promotions:
        if not is_live(promotion, now):
            continue
        match check_promotion(promotion, cart, now):
            case Ok(candidate):
                if candidate.discount > (best.discount if best is not None else ZERO):
                    best = candidate
            case Error(_):
                continue

    if best is not None:
        logger.debug("best promotion %s: discount %s", best.code, best.discount)
    return best


__all__ = (
    "has_started",
    "has_expired",
    "is_live",
    "meets_minimum",
    "applies_to_cart",
    "scoped_subtotal",
    "tier_for",
    "compute_discount",
    "applied_discount",
    "check_promotion",
    "best_promotion",
)
