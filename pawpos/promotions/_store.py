"""
Promotion lookups — the session's promotion catalog and manual codes.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult, Ok, Error
from combinators import lift as L

from pawpos.cart import Cart
from pawpos.store._records import DiscountType, Promotion
from pawpos.promotions._types import (
    AppliedPromotion,
    PromoCodeErrorKind,
    PromoCodeError,
    PromotionLoadError,
)
from pawpos.promotions._evaluate import check_promotion

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)


async def _with_tiers(store: RecordStore, promotions: list[Promotion]) -> list[Promotion]:
    tiered = [
        p.id
        for p in promotions
        if p.discount_type is DiscountType.BUY_MORE_SAVE_MORE and not p.tiers
    ]
    if not tiered:
        return promotions
    tiers = await store.list_promotion_tiers(tiered)
    return [
        replace(p, tiers=tuple(t for t in tiers if t.promotion_id == p.id)) if p.id in tiered else p
        for p in promotions
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# load_promotions
# ═══════════════════════════════════════════════════════════════════════════════


def load_promotions(
    store: RecordStore,
    now: datetime,
) -> LazyCoroResult[tuple[Promotion, ...], PromotionLoadError]:
    """Fetch live till promotions with their buy-more-save-more tiers."""

    async def fetch() -> tuple[Promotion, ...]:
        promotions = await store.list_active_promotions(pos_only=True, now=now)
        loaded = tuple(await _with_tiers(store, promotions))
        logger.debug("loaded %d promotions", len(loaded))
        return loaded

    def on_error(exc: Exception) -> PromotionLoadError:
        logger.warning("promotion load failed: %s", exc)
        return PromotionLoadError(f"Failed to load promotions: {exc}")

    return L.catching_async(fetch, on_error=on_error)


# ═══════════════════════════════════════════════════════════════════════════════
# apply_promo_code
# ═══════════════════════════════════════════════════════════════════════════════


def apply_promo_code(
    store: RecordStore,
    code: str,
    cart: Cart,
    now: datetime,
) -> LazyCoroResult[AppliedPromotion, PromoCodeError]:
    """
    Look up a code (case-insensitive) and validate it against the cart.

    Example:
        match await apply_promo_code(store, "hemat10", cart, now):
            case Ok(applied):
                session.manual = applied  # replaces the automatic pick
            case Error(e):
                toast(e.message)
    """
    if not code.strip():
        return L.fail(PromoCodeError(PromoCodeErrorKind.EMPTY_CODE, "Enter a promo code"))

    async def lookup() -> Promotion | None:
        found = await store.find_promotion_by_code(code.strip())
        if found is None:
            return None
        return (await _with_tiers(store, [found]))[0]

    def unavailable(exc: Exception) -> PromoCodeError:
        logger.warning("promo code lookup failed: %s", exc)
        return PromoCodeError(PromoCodeErrorKind.STORE_UNAVAILABLE, "Failed to apply promo code")

    def validate(found: Promotion | None) -> LazyCoroResult[AppliedPromotion, PromoCodeError]:
        if found is None:
            logger.warning("promo code %r not found", code)
            return L.fail(
                PromoCodeError(PromoCodeErrorKind.NOT_FOUND, "Invalid or inactive promo code")
            )
        checked = check_promotion(found, cart, now, manual=True)
        match checked:
            case Ok(applied):
                logger.info("promo code %s applied: discount %s", applied.code, applied.discount)
            case Error(e):
                logger.warning("promo code %s rejected: %s", found.code, e.message)
        return L.from_result(checked)

    return L.catching_async(lookup, on_error=unavailable).then(validate)


__all__ = ("load_promotions", "apply_promo_code")
