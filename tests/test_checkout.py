from dataclasses import replace
from decimal import Decimal

import pytest
from kungfu import Ok, Error

from pawpos import PaymentMethod
from pawpos.cart import select
from pawpos.checkout import (
    NOTIFICATION_TITLE,
    CheckoutDetails,
    CheckoutErrorKind,
    CheckoutRequest,
    commit_checkout,
    validate_details,
)
from pawpos.pricing import recompute_pricing
from pawpos.shipping import Destination, ManualCourier, Pickup, RatedCourier
from pawpos.store import StockKind

from conftest import NOW, JAWA_BARAT, COLLAR, COLLAR_BLUE, KIBBLE, TREATS, cart_of

DETAILS = CheckoutDetails(
    recipient_name="Budi Santoso",
    recipient_phone="081234567890",
    destination=Destination(JAWA_BARAT, "Jawa Barat"),
    recipient_address="Jl. Merdeka 1, Bandung",
    courier=RatedCourier(1),
    customer_notes="  ",
)


def request_for(cart, details=DETAILS, **kw) -> CheckoutRequest:
    return CheckoutRequest(
        cart=cart,
        pricing=recompute_pricing(cart, (), NOW, shipping_cost=Decimal(20000)),
        details=details,
        payment_method=kw.pop("payment_method", PaymentMethod.CASH),
        courier_name=kw.pop("courier_name", "JNE"),
        **kw,
    )


@pytest.fixture
def mixed_cart():
    return cart_of((select(KIBBLE), 2), (select(COLLAR, COLLAR_BLUE), 1), (select(TREATS), 1))


# ═══════════════════════════════════════════════════════════════════════════════
# Form validation
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"recipient_name": " "}, "Please enter recipient name"),
        ({"recipient_phone": ""}, "Please enter phone number"),
        ({"destination": None}, "Please select province"),
        ({"recipient_address": ""}, "Please enter delivery address"),
        ({"courier": None}, "Please select shipping courier"),
        ({"courier": ManualCourier("  ")}, "Please enter courier name"),
    ],
)
def test_validate_details_messages(changes, message):
    fields = {
        "recipient_name": DETAILS.recipient_name,
        "recipient_phone": DETAILS.recipient_phone,
        "destination": DETAILS.destination,
        "recipient_address": DETAILS.recipient_address,
        "courier": DETAILS.courier,
    } | changes

    result = validate_details(CheckoutDetails(**fields))

    assert isinstance(result, Error)
    assert result.error.kind is CheckoutErrorKind.VALIDATION
    assert result.error.message == message


def test_first_missing_field_wins():
    result = validate_details(CheckoutDetails())

    assert result.unwrap_err().message == "Please enter recipient name"


async def test_invalid_form_touches_nothing(store, two_kibble):
    result = await commit_checkout(store, request_for(two_kibble, CheckoutDetails()))

    assert result.unwrap_err().kind is CheckoutErrorKind.VALIDATION
    assert store.calls == []


async def test_empty_cart(store):
    result = await commit_checkout(store, request_for(cart_of()))

    assert result.unwrap_err().kind is CheckoutErrorKind.EMPTY_CART
    assert result.unwrap_err().message == "Cart is empty"


# ═══════════════════════════════════════════════════════════════════════════════
# Successful commit
# ═══════════════════════════════════════════════════════════════════════════════


async def test_commit_writes_order_lines_and_debits_stock(store, mixed_cart):
    result = await commit_checkout(
        store, request_for(mixed_cart, cashier_id="c-1", cashier_name="Sari")
    )

    assert isinstance(result, Ok)
    receipt = result.unwrap()
    order = store.orders[receipt.order.id]

    assert order.fields.source == "pos"
    assert order.fields.status == "paid"
    assert order.fields.payment_method == "cash"
    assert order.fields.shipping_courier == "JNE"
    assert order.fields.shipping_weight_grams == 2 * 400 + 150 + 200
    assert order.fields.destination_name == "Jawa Barat"
    assert order.fields.cashier_name == "Sari"
    assert order.fields.customer_notes is None
    assert order.fields.total_amount == Decimal(30000 + 25000 + 10000 + 20000)

    assert [(line.product_id, line.variant_id, line.quantity) for line in order.lines] == [
        ("kibble", None, 2),
        ("collar", "collar-blue", 1),
        ("treats", None, 1),
    ]
    assert order.lines[1].price_at_purchase == Decimal(25000)

    assert store.stock_of(StockKind.PRODUCT, "kibble") == 8
    assert store.stock_of(StockKind.VARIANT, "collar-blue") == 2
    assert store.stock_of(StockKind.PRODUCT, "collar") == 5
    assert store.stock_of(StockKind.PRODUCT, "treats") == 1
    assert [(d.before, d.after) for d in receipt.debits] == [(10, 8), (3, 2), (2, 1)]


async def test_commit_notifies_back_office(store, two_kibble):
    receipt = (await commit_checkout(store, request_for(two_kibble))).unwrap()

    assert receipt.notified
    [note] = store.notifications
    assert note.title == NOTIFICATION_TITLE
    assert note.message == (
        f"Order #{receipt.short_id} has been placed via POS with total amount of Rp 50.000."
    )
    assert note.link == f"/admin/orders/{receipt.order.id}"


async def test_notification_failure_does_not_fail_sale(store, two_kibble):
    store.fail("create_notification")

    result = await commit_checkout(store, request_for(two_kibble))

    assert isinstance(result, Ok)
    assert not result.unwrap().notified
    assert store.stock_of(StockKind.PRODUCT, "kibble") == 8


async def test_pickup_order_records_pickup_courier(store, two_kibble):
    details = CheckoutDetails(
        recipient_name="Budi",
        recipient_phone="0812",
        destination=Destination(JAWA_BARAT, "Jawa Barat"),
        recipient_address="Toko",
        courier=Pickup(),
    )

    receipt = (
        await commit_checkout(
            store, request_for(two_kibble, details, courier_name="Customer Pickup")
        )
    ).unwrap()

    assert receipt.order.fields.shipping_courier == "Customer Pickup"


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 1: pre-flight abort
# ═══════════════════════════════════════════════════════════════════════════════


async def test_shortfall_aborts_before_any_write(store, mixed_cart):
    # Another till sold kibble and the blue collar after they were carted.
    await store.set_stock(StockKind.PRODUCT, "kibble", 1)
    await store.set_stock(StockKind.VARIANT, "collar-blue", 0)
    store.calls.clear()

    result = await commit_checkout(store, request_for(mixed_cart))

    error = result.unwrap_err()
    assert error.kind is CheckoutErrorKind.STOCK_SHORTFALL
    assert not error.writes_started
    assert [(s.display_name, s.requested, s.available) for s in error.shortfalls] == [
        ("Royal Kibble 400g", 2, 1),
        ("Cat Collar - Blue", 1, 0),
    ]
    assert "Not enough stock for Royal Kibble 400g. Only 1 available." in error.message
    assert store.called("create_order") == []
    assert store.called("set_stock") == []
    assert store.orders == {}


async def test_missing_record_counts_as_no_stock(store, two_kibble):
    del store.products["kibble"]

    result = await commit_checkout(store, request_for(two_kibble))

    assert result.unwrap_err().shortfalls[0].available == 0
    assert store.called("create_order") == []


async def test_stock_read_failure_aborts(store, two_kibble):
    store.fail("get_stock")

    result = await commit_checkout(store, request_for(two_kibble))

    error = result.unwrap_err()
    assert error.kind is CheckoutErrorKind.STOCK_CHECK_FAILED
    assert error.message == "Failed to verify stock for Royal Kibble 400g"
    assert store.called("create_order") == []


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 2: order write
# ═══════════════════════════════════════════════════════════════════════════════


async def test_order_insert_failure(store, two_kibble):
    store.fail("create_order")

    error = (await commit_checkout(store, request_for(two_kibble))).unwrap_err()

    assert error.kind is CheckoutErrorKind.ORDER_WRITE_FAILED
    assert error.message == "Failed to create order"
    assert not error.writes_started
    assert store.called("set_stock") == []


async def test_order_lines_failure_reports_saved_order(store, two_kibble):
    store.fail("create_order_lines")

    error = (await commit_checkout(store, request_for(two_kibble))).unwrap_err()

    assert error.kind is CheckoutErrorKind.ORDER_WRITE_FAILED
    assert error.writes_started
    assert not error.requires_reconciliation
    assert error.order_id in store.orders
    assert f"Order #{error.order_id[:8]} was saved without items" in error.message
    assert store.called("set_stock") == []
    assert store.stock_of(StockKind.PRODUCT, "kibble") == 10


# ═══════════════════════════════════════════════════════════════════════════════
# Phase 3: partial commit
# ═══════════════════════════════════════════════════════════════════════════════


async def test_debit_failure_mid_sequence_is_partial_commit(store, mixed_cart):
    store.fail("set_stock", after=1)

    error = (await commit_checkout(store, request_for(mixed_cart))).unwrap_err()

    assert error.kind is CheckoutErrorKind.PARTIAL_COMMIT
    assert error.requires_reconciliation
    assert error.order_id in store.orders
    assert [d.key for d in error.debited] == [("kibble", None)]
    assert error.pending == (("collar", "collar-blue"), ("treats", None))
    assert error.message.startswith("Failed to update stock for variant: Cat Collar - Blue.")
    assert "1 of 3 items had stock deducted" in error.message

    # Nothing is rolled back.
    assert store.stock_of(StockKind.PRODUCT, "kibble") == 8
    assert store.stock_of(StockKind.VARIANT, "collar-blue") == 3
    assert store.notifications == []


async def test_debit_rereads_stock_before_writing(store, two_kibble):
    def concurrent_sale(kind, id):
        # Second read of kibble is the phase 3 re-read; another till sold one unit.
        if len(store.called("get_stock")) == 2:
            store.products["kibble"] = replace(store.products["kibble"], stock_quantity=9)

    store.on("get_stock", concurrent_sale)

    receipt = (await commit_checkout(store, request_for(two_kibble))).unwrap()

    assert receipt.debits[0].before == 9
    assert store.stock_of(StockKind.PRODUCT, "kibble") == 7
