"""
Shipping types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from pawpos._types import Money, CourierId, DestinationId

PICKUP_NAME = "Customer Pickup"

# ═══════════════════════════════════════════════════════════════════════════════
# CourierSelection — Pickup | ManualCourier | RatedCourier
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Pickup:
    """Customer collects in store. Never charged."""


@dataclass(frozen=True, slots=True)
class ManualCourier:
    """Courier typed in by the cashier; cost is entered by hand."""

    name: str


@dataclass(frozen=True, slots=True)
class RatedCourier:
    """Courier from the rate table."""

    courier_id: CourierId


type CourierSelection = Pickup | ManualCourier | RatedCourier


@dataclass(frozen=True, slots=True)
class Destination:
    """Province the parcel ships to."""

    id: DestinationId
    name: str


# ═══════════════════════════════════════════════════════════════════════════════
# Quote
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    cost: Money
    courier_name: str
    base_rate: Money | None = None
    billed_kg: int | None = None  # None under 1 kg (flat rate)
    estimated_days: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class ShippingErrorKind(Enum):
    COURIER_NOT_FOUND = auto()
    COURIER_INACTIVE = auto()
    NO_RATE_CONFIGURED = auto()
    STORE_UNAVAILABLE = auto()


@dataclass(frozen=True, slots=True)
class ShippingError:
    """No automatic cost; the cashier enters shipping by hand."""

    kind: ShippingErrorKind
    message: str
    courier_name: str | None = None


__all__ = (
    "PICKUP_NAME",
    "Pickup",
    "ManualCourier",
    "RatedCourier",
    "CourierSelection",
    "Destination",
    "ShippingQuote",
    "ShippingErrorKind",
    "ShippingError",
)
