from decimal import Decimal

import pytest
from kungfu import Ok, Error

from pawpos.shipping import (
    PICKUP_NAME,
    Destination,
    Pickup,
    ManualCourier,
    RatedCourier,
    ShippingErrorKind,
    billed_kilograms,
    tiered_cost,
    courier_display_name,
    compute_shipping,
    load_shipping_options,
)

from conftest import JAWA_BARAT, BALI, JNE

RATE = Decimal(20000)


@pytest.mark.parametrize(
    ("grams", "cost"),
    [
        (0, 20000),
        (999, 20000),
        (1000, 20000),
        (1001, 40000),
        (2000, 40000),
        (2001, 60000),
    ],
)
def test_tiered_cost_boundaries(grams, cost):
    assert tiered_cost(RATE, grams) == Decimal(cost)


def test_billed_kilograms():
    assert billed_kilograms(999) is None
    assert billed_kilograms(1000) == 1
    assert billed_kilograms(1001) == 2
    with pytest.raises(ValueError):
        billed_kilograms(-1)


def test_courier_display_name():
    assert courier_display_name(Pickup()) == PICKUP_NAME
    assert courier_display_name(ManualCourier("  Gojek  ")) == "Gojek"
    assert courier_display_name(RatedCourier(1), JNE) == "JNE"


async def test_rated_courier_quote(store):
    result = await compute_shipping(store, RatedCourier(1), JAWA_BARAT, 1001)

    quote = result.unwrap()
    assert quote.cost == Decimal(40000)
    assert quote.courier_name == "JNE"
    assert quote.base_rate == RATE
    assert quote.billed_kg == 2
    assert quote.estimated_days == "2-3"


@pytest.mark.parametrize("selection", [Pickup(), ManualCourier("Gojek")])
async def test_pickup_and_manual_cost_nothing_without_store(store, selection):
    result = await compute_shipping(store, selection, None, 5000)

    assert result.unwrap().cost == Decimal(0)
    assert store.calls == []


async def test_no_destination_leaves_cost_blank(store):
    result = await compute_shipping(store, RatedCourier(1), None, 500)

    assert result == Ok(None)
    assert store.called("get_shipping_rate") == []


@pytest.mark.parametrize(
    ("courier_id", "destination", "kind", "message"),
    [
        (99, JAWA_BARAT, ShippingErrorKind.COURIER_NOT_FOUND, "Selected courier not found"),
        (2, JAWA_BARAT, ShippingErrorKind.COURIER_INACTIVE, "Selected courier is not active"),
        (
            1,
            BALI,
            ShippingErrorKind.NO_RATE_CONFIGURED,
            "No shipping rate configured for this courier and province. Please enter manually.",
        ),
        (
            3,
            JAWA_BARAT,
            ShippingErrorKind.NO_RATE_CONFIGURED,
            "No shipping rate configured for this courier and province. Please enter manually.",
        ),
    ],
)
async def test_lookup_errors(store, courier_id, destination, kind, message):
    result = await compute_shipping(store, RatedCourier(courier_id), destination, 500)

    assert isinstance(result, Error)
    assert result.error.kind is kind
    assert result.error.message == message


async def test_inactive_courier_never_reads_rates(store):
    await compute_shipping(store, RatedCourier(2), JAWA_BARAT, 500)

    assert store.called("get_shipping_rate") == []


async def test_store_failure_is_reported(store):
    store.fail("get_shipping_rate")

    result = await compute_shipping(store, RatedCourier(1), JAWA_BARAT, 500)

    assert isinstance(result, Error)
    assert result.error.kind is ShippingErrorKind.STORE_UNAVAILABLE
    assert result.error.message == "Error calculating shipping cost"


async def test_shipping_options_list_active_by_name(store):
    options = (await load_shipping_options(store)).unwrap()

    assert options.destinations == (Destination(BALI, "Bali"), Destination(JAWA_BARAT, "Jawa Barat"))
    assert [c.courier_name for c in options.couriers] == ["AnterAja", "JNE"]
    assert options.destination(JAWA_BARAT) == Destination(JAWA_BARAT, "Jawa Barat")
    assert options.destination(31) is None


async def test_shipping_options_failure(store):
    store.fail("list_active_couriers")

    result = await load_shipping_options(store)

    assert result.unwrap_err().kind is ShippingErrorKind.STORE_UNAVAILABLE
