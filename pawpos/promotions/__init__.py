"""
Promotions — automatic best-of selection and manual codes.

    from pawpos import promotions as P

    promos = (await P.load_promotions(store, now)).unwrap()
    best = P.best_promotion(promos, cart, now)          # AppliedPromotion | None
    discount = P.applied_discount(best.discount, cart.subtotal) if best else ZERO

    match await P.apply_promo_code(store, "HEMAT10", cart, now):
        case Ok(applied): ...
        case Error(e): print(e.kind, e.message)
"""

from pawpos.promotions._types import (
    AppliedPromotion,
    PromoCodeErrorKind,
    PromoCodeError,
    PromotionLoadError,
)
from pawpos.promotions._evaluate import (
    has_started,
    has_expired,
    is_live,
    meets_minimum,
    applies_to_cart,
    scoped_subtotal,
    tier_for,
    compute_discount,
    applied_discount,
    check_promotion,
    best_promotion,
)
from pawpos.promotions._store import load_promotions, apply_promo_code

__all__ = (
    # Types
    "AppliedPromotion",
    "PromoCodeErrorKind",
    "PromoCodeError",
    "PromotionLoadError",
    # Evaluation
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
    # Store lookups
    "load_promotions",
    "apply_promo_code",
)
