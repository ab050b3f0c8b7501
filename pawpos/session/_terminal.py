"""
Terminal session — one cashier's till from start to shutdown.

Owns the catalog, promotion and shipping-option caches, the cart, the promotion choice,
the shipping form and the payment entry. Every mutation re-prices the sale
through the quote pipeline, so `session.pricing` is always current.

    session = TerminalSession(store, settings)
    await session.start()

    await session.add(session.select("p1"))
    await session.set_shipping(RatedCourier(1), Destination(11, "Jawa Barat"))
    session.update_details(recipient_name="Budi", recipient_phone="0812", recipient_address="...")
    session.enter_cash(Decimal(100000))

    match await session.checkout():
        case Ok(receipt): ...
        case Error(e): ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from kungfu import Result, Ok, Error

from pawpos._types import Money, PaymentMethod, ProductId, VariantId
from pawpos.config import TerminalSettings
from pawpos.catalog import Catalog, CatalogLoadError, load_catalog
from pawpos.cart import Cart, CartError, LineKey, LineSelection, select
from pawpos.promotions import (
    PromoCodeError,
    PromotionLoadError,
    apply_promo_code,
    load_promotions,
)
from pawpos.shipping import (
    CourierSelection,
    Destination,
    ShippingOptions,
    ShippingQuote,
    ShippingError,
    RatedCourier,
    courier_display_name,
    load_shipping_options,
)
from pawpos.customers import CustomerLookupError, autofill, search_profiles
from pawpos.pricing import (
    PricingResult,
    PaymentInstructions,
    QuoteRequest,
    can_complete_sale,
    change_due,
    payment_instructions,
    quote_sale,
    recompute_pricing,
)
from pawpos.checkout import (
    CheckoutDetails,
    CheckoutRequest,
    CheckoutReceipt,
    CheckoutErrorKind,
    CheckoutError,
    commit_checkout,
)
from pawpos.store._records import CustomerProfile, Promotion
from pawpos.session._cache import SessionCache

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)

RECIPIENT_FIELDS = frozenset(
    {"recipient_name", "recipient_phone", "recipient_address", "customer_notes"}
)


class TerminalSession:
    def __init__(
        self,
        store: RecordStore,
        settings: TerminalSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or TerminalSettings()
        self._clock = clock or (lambda: datetime.now(UTC))

        self.catalog_cache: SessionCache[Catalog, CatalogLoadError] = SessionCache(
            "catalog", lambda: load_catalog(store), clock=self._clock
        )
        self.promotion_cache: SessionCache[tuple[Promotion, ...], PromotionLoadError] = (
            SessionCache("promotions", lambda: load_promotions(store, self._clock()), clock=self._clock)
        )
        self.shipping_options_cache: SessionCache[ShippingOptions, ShippingError] = SessionCache(
            "shipping options", lambda: load_shipping_options(store), clock=self._clock
        )

        self._committing = False
        self._reset_sale()

    def _reset_sale(self) -> None:
        self.cart = Cart()
        self.manual_promotion: Promotion | None = None
        self.details = CheckoutDetails()
        self.shipping_quote: ShippingQuote | None = None
        self.shipping_error: ShippingError | None = None
        self.shipping_override: Money | None = None
        self.payment_method = PaymentMethod.CASH
        self.cash_received: Money | None = None
        self.pricing: PricingResult = recompute_pricing(self.cart, (), self._clock())

    # ═══════════════════════════════════════════════════════════════════════════
    # Caches
    # ═══════════════════════════════════════════════════════════════════════════

    async def start(self) -> Result[Catalog, CatalogLoadError | PromotionLoadError]:
        """Load the catalog and the promotion list for this session."""
        match await self.catalog_cache.get():
            case Error(e):
                return Error(e)
            case Ok(cached_catalog):
                pass
        match await self.promotion_cache.get():
            case Error(e):
                return Error(e)
            case Ok(_):
                pass
        logger.info("terminal session started with %d products", len(cached_catalog.value))
        return Ok(cached_catalog.value)

    @property
    def catalog(self) -> Catalog:
        return self.catalog_cache.value or Catalog()

    @property
    def promotions(self) -> tuple[Promotion, ...]:
        return self.promotion_cache.value or ()

    def select(self, product_id: ProductId, variant_id: VariantId | None = None) -> LineSelection:
        """Selection from the loaded catalog. Raises LookupError for unknown ids."""
        entry = self.catalog.get(product_id)
        if entry is None:
            raise LookupError(f"product {product_id} is not in the catalog")
        if variant_id is None:
            return select(entry.product)
        variant = entry.variant(variant_id)
        if variant is None:
            raise LookupError(f"variant {variant_id} is not in product {product_id}")
        return select(entry.product, variant)

    # ═══════════════════════════════════════════════════════════════════════════
    # Re-pricing
    # ═══════════════════════════════════════════════════════════════════════════

    async def reprice(self) -> PricingResult:
        """Re-run shipping lookup and pricing for the current state."""
        quote = await quote_sale(
            self.store,
            QuoteRequest(
                cart=self.cart,
                promotions=self.promotions,
                now=self._clock(),
                courier=self.details.courier,
                destination_id=self.details.destination.id if self.details.destination else None,
                manual_promotion=self.manual_promotion,
                shipping_override=self.shipping_override,
            ),
        )
        self.shipping_quote = quote.shipping
        self.shipping_error = quote.shipping_error
        self.pricing = quote.pricing
        if quote.pricing.manual_rejected is not None:
            self.manual_promotion = None
        return self.pricing

    async def _apply(self, result: Result[Cart, CartError]) -> Result[PricingResult, CartError]:
        match result:
            case Ok(cart):
                self.cart = cart
                return Ok(await self.reprice())
            case Error(e):
                logger.debug("cart change rejected: %s", e.message)
                return Error(e)

    # ═══════════════════════════════════════════════════════════════════════════
    # Cart
    # ═══════════════════════════════════════════════════════════════════════════

    async def add(self, selection: LineSelection) -> Result[PricingResult, CartError]:
        return await self._apply(self.cart.add_line(selection))

    async def change_quantity(self, key: LineKey, delta: int) -> Result[PricingResult, CartError]:
        return await self._apply(self.cart.change_quantity(key, delta))

    async def remove_line(self, key: LineKey) -> PricingResult:
        self.cart = self.cart.remove_line(key)
        return await self.reprice()

    async def clear_cart(self) -> PricingResult:
        self.cart = self.cart.clear()
        return await self.reprice()

    # ═══════════════════════════════════════════════════════════════════════════
    # Promotions
    # ═══════════════════════════════════════════════════════════════════════════

    async def apply_promo_code(self, code: str) -> Result[PricingResult, PromoCodeError]:
        """Validate a typed code; on success it replaces the automatic pick."""
        match await apply_promo_code(self.store, code, self.cart, self._clock()):
            case Ok(applied):
                self.manual_promotion = applied.promotion
                return Ok(await self.reprice())
            case Error(e):
                return Error(e)

    async def remove_promo_code(self) -> PricingResult:
        """Back to automatic best-promotion selection."""
        self.manual_promotion = None
        return await self.reprice()

    # ═══════════════════════════════════════════════════════════════════════════
    # Shipping + details
    # ═══════════════════════════════════════════════════════════════════════════

    async def set_shipping(
        self,
        courier: CourierSelection | None,
        destination: Destination | None = None,
    ) -> PricingResult:
        """Change courier or destination. A typed cost is cleared."""
        self.details = replace(self.details, courier=courier, destination=destination)
        self.shipping_override = None
        return await self.reprice()

    async def override_shipping_cost(self, amount: Money | None) -> PricingResult:
        """Cashier-typed shipping cost; None returns to the rate-table quote."""
        if amount is not None and amount < 0:
            raise ValueError("shipping cost cannot be negative")
        self.shipping_override = amount
        return await self.reprice()

    def update_details(self, **changes: str) -> CheckoutDetails:
        """
        Set recipient fields: recipient_name, recipient_phone,
        recipient_address, customer_notes.

        Courier and destination go through set_shipping so the fee follows them.
        """
        refused = sorted(changes.keys() - RECIPIENT_FIELDS)
        if refused:
            raise TypeError(
                f"update_details() cannot set {', '.join(refused)}; "
                "use set_shipping() for courier and destination"
            )
        self.details = replace(self.details, **changes)  # type: ignore[arg-type]
        return self.details

    @property
    def courier_name(self) -> str:
        courier = self.details.courier
        if courier is None:
            return ""
        if isinstance(courier, RatedCourier):
            if self.shipping_quote is not None:
                return self.shipping_quote.courier_name
            if self.shipping_error is not None and self.shipping_error.courier_name:
                return self.shipping_error.courier_name
            return ""
        return courier_display_name(courier)

    async def shipping_options(self) -> Result[ShippingOptions, ShippingError]:
        """Active destinations and couriers for the form, fetched once per session."""
        match await self.shipping_options_cache.get():
            case Ok(cached):
                return Ok(cached.value)
            case Error(e):
                return Error(e)

    # ═══════════════════════════════════════════════════════════════════════════
    # Customer lookup
    # ═══════════════════════════════════════════════════════════════════════════

    async def search_customers(
        self, query: str
    ) -> Result[list[CustomerProfile], CustomerLookupError]:
        return await search_profiles(self.store, query)

    async def fill_from_profile(self, profile: CustomerProfile) -> PricingResult:
        """
        Prefill the recipient form. A saved province that is not an active
        destination leaves the current one in place.
        """
        fill = autofill(profile)
        self.update_details(
            recipient_name=fill.recipient_name,
            recipient_phone=fill.recipient_phone,
            recipient_address=fill.recipient_address,
        )
        if fill.destination_id is None:
            return self.pricing

        match await self.shipping_options():
            case Error(e):
                logger.warning("destination for profile %s not resolved: %s", profile.id, e.message)
                return self.pricing
            case Ok(options):
                destination = options.destination(fill.destination_id)
                if destination is None:
                    logger.warning(
                        "profile %s has unknown destination %s", profile.id, fill.destination_id
                    )
                    return self.pricing
                if destination == self.details.destination:
                    return self.pricing
                return await self.set_shipping(self.details.courier, destination)

    # ═══════════════════════════════════════════════════════════════════════════
    # Payment
    # ═══════════════════════════════════════════════════════════════════════════

    def select_payment(self, method: PaymentMethod) -> PaymentInstructions | None:
        """Switch method. Disabled methods raise ValueError."""
        if not self.settings.payment.is_enabled(method):
            raise ValueError(f"payment method {method.value} is not enabled")
        self.payment_method = method
        if method is not PaymentMethod.CASH:
            self.cash_received = None
        return payment_instructions(method, self.settings.payment)

    def enter_cash(self, amount: Money | None) -> None:
        self.cash_received = amount

    @property
    def change(self) -> Money | None:
        if self.payment_method is not PaymentMethod.CASH or self.cash_received is None:
            return None
        return change_due(self.pricing.total, self.cash_received)

    @property
    def can_complete_sale(self) -> bool:
        return not self.cart.is_empty and can_complete_sale(
            self.pricing.total,
            self.payment_method,
            self.cash_received,
            self.settings.payment,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Checkout
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def processing(self) -> bool:
        return self._committing

    async def checkout(self) -> Result[CheckoutReceipt, CheckoutError]:
        """
        Commit the sale. On success the sale state is reset and the catalog
        re-fetched; on failure everything stays for the cashier to act on.
        """
        if self._committing:
            return Error(
                CheckoutError(CheckoutErrorKind.VALIDATION, "Checkout already in progress")
            )
        if not self.cart.is_empty and not self.can_complete_sale:
            return Error(
                CheckoutError(CheckoutErrorKind.VALIDATION, "Insufficient payment for this sale")
            )

        request = CheckoutRequest(
            cart=self.cart,
            pricing=self.pricing,
            details=self.details,
            payment_method=self.payment_method,
            courier_name=self.courier_name,
            cashier_id=self.settings.cashier_id,
            cashier_name=self.settings.cashier_name,
        )

        self._committing = True
        try:
            result = await commit_checkout(self.store, request)
        finally:
            self._committing = False

        match result:
            case Ok(receipt):
                self._reset_sale()
                match await self.catalog_cache.refresh():
                    case Error(e):
                        logger.warning("catalog refresh after sale failed: %s", e.message)
                    case Ok(_):
                        pass
                return Ok(receipt)
            case Error(e):
                return Error(e)


__all__ = ("TerminalSession",)
