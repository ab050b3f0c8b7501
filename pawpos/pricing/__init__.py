"""
Pricing — payable total, change, and payment instructions.

    from pawpos import pricing as Pr

    result = Pr.recompute_pricing(cart, promotions, now, shipping_cost=Decimal(20000))
    Pr.change_due(result.total, Decimal(100000))
    Pr.can_complete_sale(result.total, PaymentMethod.CASH, cash_received=Decimal(50000))

    quote = await Pr.quote_sale(store, Pr.QuoteRequest(cart, promotions, now, courier=...))
"""

from pawpos.pricing._types import PricingResult, PaymentInstructions
from pawpos.pricing._aggregate import recompute_pricing, change_due, can_complete_sale
from pawpos.pricing._instructions import payment_instructions
from pawpos.pricing._graph import (
    QuoteRequest,
    SaleQuote,
    ShippingNode,
    PricingNode,
    quote_sale,
)

__all__ = (
    # Types
    "PricingResult",
    "PaymentInstructions",
    # Aggregation
    "recompute_pricing",
    "change_due",
    "can_complete_sale",
    "payment_instructions",
    # Graph
    "QuoteRequest",
    "SaleQuote",
    "ShippingNode",
    "PricingNode",
    "quote_sale",
)
