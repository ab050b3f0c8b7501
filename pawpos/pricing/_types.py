"""
Pricing types.
"""

from __future__ import annotations

from dataclasses import dataclass

from pawpos._types import Money, PaymentMethod
from pawpos.promotions import AppliedPromotion, PromoCodeError

# ═══════════════════════════════════════════════════════════════════════════════
# PricingResult
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricingResult:
    """
    Everything the cashier sees for the current cart.

    shipping_quoted is None while the cost is blank (no rate, no destination);
    shipping_cost is what the total charges, 0 when blank or under a
    free-shipping promotion.
    """

    subtotal: Money
    discount: Money
    shipping_quoted: Money | None
    shipping_cost: Money
    total: Money
    total_weight_grams: int
    total_quantity: int
    promotion: AppliedPromotion | None = None
    manual_rejected: PromoCodeError | None = None

    @property
    def free_shipping(self) -> bool:
        return self.promotion is not None and self.promotion.free_shipping


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Instructions
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentInstructions:
    """Static details shown next to the total for a non-cash method."""

    method: PaymentMethod
    title: str
    details: tuple[tuple[str, str], ...]
    image: str | None = None


__all__ = ("PricingResult", "PaymentInstructions")
