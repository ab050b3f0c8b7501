"""
Quote pipeline — shipping lookup and pricing as a node graph.

    quote = await quote_sale(store, QuoteRequest(
        cart=cart,
        promotions=promotions,
        now=now,
        courier=RatedCourier(1),
        destination_id=11,
    ))
    quote.pricing.total, quote.shipping, quote.shipping_error

ShippingNode talks to the store; PricingNode is the pure recompute_pricing
over whatever shipping produced. A cashier-typed cost overrides the quote.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, cast
from collections.abc import Callable, Coroutine

from kungfu import Ok, Error
from nodnod import Scope, Value, EventLoopAgent, Node, scalar_node as node

from pawpos._types import Money, DestinationId
from pawpos.cart import Cart
from pawpos.shipping import (
    CourierSelection,
    ShippingQuote,
    ShippingError,
    compute_shipping,
)
from pawpos.store._protocol import RecordStore
from pawpos.store._records import Promotion
from pawpos.pricing._types import PricingResult
from pawpos.pricing._aggregate import recompute_pricing

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Inputs / Output
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class QuoteRequest:
    cart: Cart
    promotions: tuple[Promotion, ...]
    now: datetime
    courier: CourierSelection | None = None
    destination_id: DestinationId | None = None
    manual_promotion: Promotion | None = None
    shipping_override: Money | None = None


@dataclass(frozen=True, slots=True)
class SaleQuote:
    pricing: PricingResult
    shipping: ShippingQuote | None = None
    shipping_error: ShippingError | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@node
class ShippingNode:
    """Quote from the rate table, or the error that leaves the cost blank."""

    def __init__(self, quote: ShippingQuote | None, error: ShippingError | None) -> None:
        self.quote = quote
        self.error = error

    @classmethod
    async def __compose__(cls, request: QuoteRequest, store: RecordStore) -> "ShippingNode":
        if request.courier is None:
            return cls(None, None)
        result = await compute_shipping(
            store,
            request.courier,
            request.destination_id,
            request.cart.total_weight_grams,
        )
        match result:
            case Ok(quote):
                return cls(quote, None)
            case Error(e):
                return cls(None, e)


@node
class PricingNode:
    def __init__(self, quote: SaleQuote) -> None:
        self.quote = quote

    @classmethod
    async def __compose__(cls, request: QuoteRequest, shipping: ShippingNode) -> "PricingNode":
        cost: Money | None = request.shipping_override
        if cost is None and shipping.quote is not None:
            cost = shipping.quote.cost

        pricing = recompute_pricing(
            request.cart,
            request.promotions,
            request.now,
            manual=request.manual_promotion,
            shipping_cost=cost,
        )
        return cls(SaleQuote(pricing, shipping.quote, shipping.error))


# ═══════════════════════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════════════════════


async def _compose[T](target: type[T], *injections: tuple[type[Any], Any]) -> T:
    agent = EventLoopAgent.build({cast(type[Node[Any, Any]], target)})

    async with Scope(detail="quote") as scope:
        for typ, value in injections:
            scope.push(Value(typ, value))

        run_method = cast(
            Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
            getattr(agent, "run"),
        )
        await run_method(scope, {})

        found = scope.get(target)
        if found is None:
            raise KeyError(f"{target.__name__} not found in scope")
        return cast(T, found.value)


async def quote_sale(store: RecordStore, request: QuoteRequest) -> SaleQuote:
    """Run the shipping lookup and pricing for one cart state."""
    priced = await _compose(
        PricingNode,
        (QuoteRequest, request),
        (RecordStore, store),
    )
    quote = priced.quote
    if quote.shipping_error is not None:
        logger.info("shipping left blank: %s", quote.shipping_error.message)
    return quote


__all__ = ("QuoteRequest", "SaleQuote", "ShippingNode", "PricingNode", "quote_sale")
