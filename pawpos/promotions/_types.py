"""
Promotion evaluation types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from pawpos._types import Money
from pawpos.store._records import DiscountType, Promotion

# ═══════════════════════════════════════════════════════════════════════════════
# AppliedPromotion
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AppliedPromotion:
    """
    A promotion chosen for the cart, with the discount it computed.

    `discount` is before the subtotal cap; use applied_discount() for the
    amount taken off the order.
    """

    promotion: Promotion
    discount: Money
    manual: bool = False

    @property
    def code(self) -> str:
        return self.promotion.code

    @property
    def free_shipping(self) -> bool:
        return (
            self.promotion.free_shipping
            or self.promotion.discount_type is DiscountType.FREE_SHIPPING
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class PromoCodeErrorKind(Enum):
    EMPTY_CODE = auto()
    NOT_FOUND = auto()
    NOT_STARTED = auto()
    EXPIRED = auto()
    MIN_PURCHASE_NOT_MET = auto()
    NOT_APPLICABLE = auto()
    STORE_UNAVAILABLE = auto()


@dataclass(frozen=True, slots=True)
class PromoCodeError:
    kind: PromoCodeErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class PromotionLoadError:
    message: str


__all__ = (
    "AppliedPromotion",
    "PromoCodeErrorKind",
    "PromoCodeError",
    "PromotionLoadError",
)
