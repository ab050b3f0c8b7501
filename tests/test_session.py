from dataclasses import replace
from decimal import Decimal

import pytest
from kungfu import Ok, Error

from pawpos import PaymentMethod
from pawpos.cart import CartErrorKind
from pawpos.catalog import load_catalog
from pawpos.checkout import CheckoutErrorKind
from pawpos.config import PaymentSettings, TerminalSettings
from pawpos.promotions import PromoCodeErrorKind
from pawpos.session import SessionCache, TerminalSession
from pawpos.shipping import Destination, ManualCourier, Pickup, RatedCourier, ShippingErrorKind
from pawpos.store import DiscountType, Promotion, StockKind

from conftest import ANI, BALI, BUDI, JAWA_BARAT, clock

HEMAT = Promotion("pct", "HEMAT10", DiscountType.PERCENTAGE, Decimal(10))
POTONG = Promotion("fix", "POTONG", DiscountType.FIXED, Decimal(500))


@pytest.fixture
def settings():
    return TerminalSettings(
        cashier_id="c-7",
        cashier_name="Sari",
        payment=PaymentSettings(ewallet_enabled=True, ewallet_provider="OVO", ewallet_number="0812"),
    )


@pytest.fixture
async def session(store, settings):
    session = TerminalSession(store, settings, clock=clock)
    (await session.start()).unwrap()
    return session


async def fill_form(session: TerminalSession) -> None:
    await session.set_shipping(RatedCourier(1), Destination(JAWA_BARAT, "Jawa Barat"))
    session.update_details(
        recipient_name="Budi",
        recipient_phone="0812",
        recipient_address="Jl. Merdeka 1",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SessionCache
# ═══════════════════════════════════════════════════════════════════════════════


async def test_cache_hits_after_first_load(store):
    cache = SessionCache("catalog", lambda: load_catalog(store), clock=clock)

    first = (await cache.get()).unwrap()
    second = (await cache.get()).unwrap()

    assert not first.hit
    assert second.hit
    assert len(store.called("list_active_products")) == 1


async def test_cache_refresh_failure_drops_value(store):
    cache = SessionCache("catalog", lambda: load_catalog(store))
    await cache.get()
    store.fail("list_active_products")

    result = await cache.refresh()

    assert isinstance(result, Error)
    assert cache.value is None
    assert cache.loaded_at is None


async def test_cache_invalidate(store):
    cache = SessionCache("catalog", lambda: load_catalog(store))

    assert not cache.invalidate()
    await cache.get()
    assert cache.invalidate()
    assert cache.value is None


# ═══════════════════════════════════════════════════════════════════════════════
# TerminalSession
# ═══════════════════════════════════════════════════════════════════════════════


async def test_start_failure_is_reported(store, settings):
    store.fail("list_active_products")
    session = TerminalSession(store, settings, clock=clock)

    result = await session.start()

    assert result.unwrap_err().message.startswith("Failed to load products")
    assert len(session.catalog) == 0


async def test_full_sale(session, store):
    priced = (await session.add(session.select("kibble"))).unwrap()
    assert priced.subtotal == Decimal(15000)
    await session.add(session.select("kibble"))
    await fill_form(session)

    assert session.pricing.total == Decimal(50000)
    assert not session.can_complete_sale

    session.enter_cash(Decimal(100000))
    assert session.change == Decimal(50000)
    assert session.can_complete_sale

    receipt = (await session.checkout()).unwrap()

    assert receipt.total == Decimal(50000)
    assert receipt.order.fields.shipping_courier == "JNE"
    assert receipt.order.fields.cashier_id == "c-7"
    assert session.cart.is_empty
    assert session.cash_received is None
    assert session.details.courier is None
    assert session.catalog.get("kibble").product.stock_quantity == 8
    assert store.stock_of(StockKind.PRODUCT, "kibble") == 8


async def test_checkout_needs_enough_cash(session):
    await session.add(session.select("kibble"))
    await fill_form(session)
    session.enter_cash(Decimal(1000))

    result = await session.checkout()

    assert result.unwrap_err().kind is CheckoutErrorKind.VALIDATION
    assert not session.cart.is_empty


async def test_failed_checkout_keeps_sale(session, store):
    await session.add(session.select("kibble"))
    await fill_form(session)
    session.enter_cash(Decimal(50000))
    store.fail("create_order")

    result = await session.checkout()

    assert result.unwrap_err().kind is CheckoutErrorKind.ORDER_WRITE_FAILED
    assert not session.cart.is_empty
    assert not session.processing


async def test_cart_errors_leave_cart(session):
    result = await session.add(session.select("sand"))

    assert result.unwrap_err().kind is CartErrorKind.OUT_OF_STOCK
    assert session.cart.is_empty


async def test_select_unknown_product(session):
    with pytest.raises(LookupError):
        session.select("nope")
    with pytest.raises(LookupError):
        session.select("collar", "collar-green")


async def test_quantity_changes_reprice(session):
    await session.add(session.select("collar", "collar-blue"))

    priced = (await session.change_quantity(("collar", "collar-blue"), 2)).unwrap()
    assert priced.subtotal == Decimal(75000)

    assert isinstance(await session.change_quantity(("collar", "collar-blue"), 1), Error)
    assert (await session.remove_line(("collar", "collar-blue"))).subtotal == Decimal(0)


async def test_auto_promotion_then_manual_code(session, store):
    store.add_promotion(HEMAT)
    store.add_promotion(POTONG)
    await session.promotion_cache.refresh()

    await session.add(session.select("kibble"))
    assert session.pricing.promotion.code == "HEMAT10"

    priced = (await session.apply_promo_code("potong")).unwrap()
    assert priced.promotion.code == "POTONG"
    assert priced.discount == Decimal(500)

    # Manual code sticks across cart changes.
    await session.add(session.select("treats"))
    assert session.pricing.promotion.code == "POTONG"

    priced = await session.remove_promo_code()
    assert priced.promotion.code == "HEMAT10"


async def test_bad_promo_code_keeps_current_pricing(session):
    await session.add(session.select("kibble"))

    result = await session.apply_promo_code("NOPE")

    assert isinstance(result, Error)
    assert result.error.kind is PromoCodeErrorKind.NOT_FOUND
    assert session.manual_promotion is None


async def test_missing_rate_then_manual_override(session):
    await session.add(session.select("kibble"))

    priced = await session.set_shipping(RatedCourier(1), Destination(BALI, "Bali"))
    assert priced.shipping_quoted is None
    assert session.shipping_error is not None
    assert session.courier_name == "JNE"

    priced = await session.override_shipping_cost(Decimal(35000))
    assert priced.total == Decimal(50000)

    with pytest.raises(ValueError):
        await session.override_shipping_cost(Decimal(-1))


async def test_manual_courier_name(session):
    await session.set_shipping(ManualCourier(" Gojek "), Destination(JAWA_BARAT, "Jawa Barat"))

    assert session.courier_name == "Gojek"
    assert session.pricing.shipping_cost == Decimal(0)


async def test_payment_selection(session):
    await session.add(session.select("kibble"))
    session.enter_cash(Decimal(20000))

    instructions = session.select_payment(PaymentMethod.EWALLET)

    assert instructions.title == "E-Wallet"
    assert session.cash_received is None
    assert session.change is None
    assert session.can_complete_sale

    with pytest.raises(ValueError):
        session.select_payment(PaymentMethod.QRIS)
    assert session.payment_method is PaymentMethod.EWALLET
    assert session.select_payment(PaymentMethod.CASH) is None


# ═══════════════════════════════════════════════════════════════════════════════
# Recipient form
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "changes",
    [
        {"courier": Pickup()},
        {"destination": Destination(BALI, "Bali")},
        {"recipient_name": "Budi", "courier": None},
    ],
)
async def test_update_details_refuses_shipping_fields(session, changes):
    await session.add(session.select("kibble"))
    await fill_form(session)
    before = session.details

    with pytest.raises(TypeError, match="set_shipping"):
        session.update_details(**changes)

    assert session.details == before
    assert session.pricing.shipping_cost == Decimal(20000)


async def test_switch_to_pickup_commits_without_fee(session):
    await session.add(session.select("kibble"))
    await fill_form(session)
    assert session.pricing.shipping_cost == Decimal(20000)

    await session.set_shipping(Pickup(), Destination(JAWA_BARAT, "Jawa Barat"))
    session.enter_cash(Decimal(100000))
    receipt = (await session.checkout()).unwrap()

    assert receipt.order.fields.shipping_courier == "Customer Pickup"
    assert receipt.order.fields.shipping_fee == Decimal(0)
    assert receipt.total == Decimal(15000)


async def test_update_details_sets_notes(session):
    details = session.update_details(customer_notes="Gift wrap")

    assert details.customer_notes == "Gift wrap"


async def test_fill_from_profile_sets_destination_and_reprices(session):
    await session.add(session.select("kibble"))
    await session.set_shipping(RatedCourier(1))
    profile = replace(BUDI, recipient_province_id=JAWA_BARAT)

    priced = await session.fill_from_profile(profile)

    assert session.details.recipient_name == "Ibu Sri"
    assert session.details.recipient_phone == "081234567890"
    assert session.details.recipient_address == "Jl. Sunset Road 8, Kuta"
    assert session.details.destination == Destination(JAWA_BARAT, "Jawa Barat")
    assert priced.shipping_cost == Decimal(20000)
    assert priced.total == Decimal(35000)


async def test_fill_from_profile_without_rate_leaves_cost_blank(session):
    await session.add(session.select("kibble"))
    await session.set_shipping(RatedCourier(1), Destination(JAWA_BARAT, "Jawa Barat"))

    priced = await session.fill_from_profile(BUDI)

    assert session.details.destination == Destination(BALI, "Bali")
    assert session.details.courier == RatedCourier(1)
    assert priced.shipping_quoted is None
    assert session.shipping_error.kind is ShippingErrorKind.NO_RATE_CONFIGURED


async def test_fill_from_profile_keeps_destination_without_saved_province(session):
    await session.set_shipping(RatedCourier(1), Destination(JAWA_BARAT, "Jawa Barat"))

    await session.fill_from_profile(ANI)

    assert session.details.recipient_name == "Ani"
    assert session.details.destination == Destination(JAWA_BARAT, "Jawa Barat")
    assert session.store.called("list_destinations") == []


async def test_fill_from_profile_ignores_inactive_province(session, store):
    await session.set_shipping(RatedCourier(1), Destination(JAWA_BARAT, "Jawa Barat"))

    await session.fill_from_profile(replace(BUDI, recipient_province_id=31))
    await session.fill_from_profile(replace(BUDI, recipient_province_id=31))

    assert session.details.destination == Destination(JAWA_BARAT, "Jawa Barat")
    assert len(store.called("list_destinations")) == 1


async def test_customer_search_through_session(session):
    assert (await session.search_customers("b")).unwrap() == []
    assert [p.id for p in (await session.search_customers("0812")).unwrap()] == ["u-budi"]


async def test_shipping_options_through_session(session, store):
    options = (await session.shipping_options()).unwrap()
    await session.shipping_options()

    assert [d.name for d in options.destinations] == ["Bali", "Jawa Barat"]
    assert len(store.called("list_active_couriers")) == 1
