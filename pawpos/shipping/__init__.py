"""
Shipping — weight-tiered courier cost.

    from pawpos import shipping as S

    S.tiered_cost(Decimal(20000), 1001)  # Decimal(40000)
    quote = await S.compute_shipping(store, S.RatedCourier(1), 11, cart.total_weight_grams)
"""

from pawpos.shipping._types import (
    PICKUP_NAME,
    Pickup,
    ManualCourier,
    RatedCourier,
    CourierSelection,
    Destination,
    ShippingQuote,
    ShippingErrorKind,
    ShippingError,
)
from pawpos.shipping._calc import (
    GRAMS_PER_KG,
    billed_kilograms,
    tiered_cost,
    courier_display_name,
    compute_shipping,
)
from pawpos.shipping._options import ShippingOptions, load_shipping_options

__all__ = (
    # Selection
    "PICKUP_NAME",
    "Pickup",
    "ManualCourier",
    "RatedCourier",
    "CourierSelection",
    "Destination",
    # Result
    "ShippingQuote",
    "ShippingErrorKind",
    "ShippingError",
    # Calculation
    "GRAMS_PER_KG",
    "billed_kilograms",
    "tiered_cost",
    "courier_display_name",
    "compute_shipping",
    # Form choices
    "ShippingOptions",
    "load_shipping_options",
)
