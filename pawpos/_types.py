"""
Core types for pawpos.

Re-exports from kungfu + shared aliases used across the till.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Never

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Pure[T] = Lazy[T, Never]
"""Lazy computation that cannot fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Domain Scalars
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Rupiah amount. No minor unit, but percentage discounts may produce fractions."""

type ProductId = str
type VariantId = str
type PromotionId = str
type CourierId = int
type DestinationId = int
type OrderId = str

ZERO = Decimal(0)


class PaymentMethod(StrEnum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    EWALLET = "ewallet"
    QRIS = "qris"


def money(value: object) -> Money:
    """Coerce a store value (int, float, str, Decimal, None) into Money."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)  # type: ignore[arg-type]


def format_idr(amount: Money) -> str:
    """Format like the till display: ``Rp 1.250.000``."""
    whole = int(amount.quantize(Decimal(1)))
    sign = "-" if whole < 0 else ""
    return f"{sign}Rp {abs(whole):,}".replace(",", ".")


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    "Pure",
    "Money",
    "ProductId",
    "VariantId",
    "PromotionId",
    "CourierId",
    "DestinationId",
    "OrderId",
    "PaymentMethod",
    # Helpers
    "ZERO",
    "money",
    "format_idr",
)
