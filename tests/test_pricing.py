from decimal import Decimal

import pytest

from pawpos import PaymentMethod
from pawpos.cart import select
from pawpos.config import PaymentSettings
from pawpos.promotions import PromoCodeErrorKind
from pawpos.pricing import (
    QuoteRequest,
    can_complete_sale,
    change_due,
    payment_instructions,
    quote_sale,
    recompute_pricing,
)
from pawpos.shipping import Pickup, RatedCourier, ShippingErrorKind
from pawpos.store import DiscountType, Promotion

from conftest import NOW, JAWA_BARAT, BALI, KIBBLE, TREATS, cart_of

HEMAT = Promotion("pct", "HEMAT10", DiscountType.PERCENTAGE, Decimal(10))
ONGKIR = Promotion("ship", "ONGKIR", DiscountType.FIXED, Decimal(1000), free_shipping=True)


async def test_end_to_end_total_and_change(store, two_kibble):
    quote = await quote_sale(
        store,
        QuoteRequest(two_kibble, (), NOW, courier=RatedCourier(1), destination_id=JAWA_BARAT),
    )
    pricing = quote.pricing

    assert pricing.total_weight_grams == 800
    assert quote.shipping.cost == Decimal(20000)
    assert quote.shipping.billed_kg is None
    assert pricing.subtotal == Decimal(30000)
    assert pricing.discount == Decimal(0)
    assert pricing.total == Decimal(50000)

    assert change_due(pricing.total, Decimal(50000)) == Decimal(0)
    assert change_due(pricing.total, Decimal(100000)) == Decimal(50000)


def test_total_is_subtotal_minus_discount_plus_shipping(two_kibble):
    pricing = recompute_pricing(two_kibble, [HEMAT], NOW, shipping_cost=Decimal(20000))

    assert pricing.promotion.code == "HEMAT10"
    assert pricing.discount == Decimal(3000)
    assert pricing.total == Decimal(30000 - 3000 + 20000)


def test_blank_shipping_charges_nothing(two_kibble):
    pricing = recompute_pricing(two_kibble, (), NOW)

    assert pricing.shipping_quoted is None
    assert pricing.shipping_cost == Decimal(0)
    assert pricing.total == Decimal(30000)


def test_free_shipping_rider_zeroes_charge_but_keeps_quote(two_kibble):
    pricing = recompute_pricing(two_kibble, [ONGKIR], NOW, shipping_cost=Decimal(20000))

    assert pricing.free_shipping
    assert pricing.shipping_quoted == Decimal(20000)
    assert pricing.shipping_cost == Decimal(0)
    assert pricing.total == Decimal(30000 - 1000)


def test_manual_promotion_replaces_automatic_pick(two_kibble):
    fixed = Promotion("fix", "POTONG", DiscountType.FIXED, Decimal(500))

    pricing = recompute_pricing(two_kibble, [HEMAT], NOW, manual=fixed)

    assert pricing.promotion.code == "POTONG"
    assert pricing.promotion.manual
    assert pricing.discount == Decimal(500)


def test_manual_promotion_falls_back_when_cart_no_longer_qualifies(two_kibble):
    big = Promotion("big", "BIG", DiscountType.FIXED, Decimal(5000), min_purchase_amount=Decimal(100000))

    pricing = recompute_pricing(two_kibble, [HEMAT], NOW, manual=big)

    assert pricing.promotion.code == "HEMAT10"
    assert pricing.manual_rejected.kind is PromoCodeErrorKind.MIN_PURCHASE_NOT_MET


def test_empty_cart_prices_to_zero():
    pricing = recompute_pricing(cart_of(), [HEMAT], NOW, shipping_cost=Decimal(20000))

    assert pricing.promotion is None
    assert pricing.subtotal == Decimal(0)


def test_can_complete_sale():
    payment = PaymentSettings(qris_enabled=True)
    total = Decimal(50000)

    assert can_complete_sale(total, PaymentMethod.CASH, Decimal(50000))
    assert not can_complete_sale(total, PaymentMethod.CASH, Decimal(49999))
    assert not can_complete_sale(total, PaymentMethod.CASH, None)
    assert can_complete_sale(total, PaymentMethod.QRIS, payment=payment)
    assert not can_complete_sale(total, PaymentMethod.BANK_TRANSFER, payment=payment)


def test_payment_instructions():
    payment = PaymentSettings(
        bank_transfer_enabled=True,
        bank_name="BCA",
        bank_account_number="1234567890",
        bank_account_name="Toko Hewan",
        qris_enabled=True,
        qris_image="/static/qris.png",
        qris_name="Toko Hewan",
        qris_nmid="ID1020",
    )

    bank = payment_instructions(PaymentMethod.BANK_TRANSFER, payment)
    assert bank.title == "Bank Transfer"
    assert ("Account Number", "1234567890") in bank.details

    qris = payment_instructions(PaymentMethod.QRIS, payment)
    assert qris.image == "/static/qris.png"

    assert payment_instructions(PaymentMethod.CASH, payment) is None
    assert payment_instructions(PaymentMethod.EWALLET, payment) is None


async def test_quote_without_courier_skips_store(store, two_kibble):
    quote = await quote_sale(store, QuoteRequest(two_kibble, (), NOW))

    assert quote.shipping is None
    assert quote.shipping_error is None
    assert store.calls == []


async def test_quote_missing_rate_leaves_shipping_blank(store, two_kibble):
    quote = await quote_sale(
        store,
        QuoteRequest(two_kibble, (), NOW, courier=RatedCourier(1), destination_id=BALI),
    )

    assert quote.shipping_error.kind is ShippingErrorKind.NO_RATE_CONFIGURED
    assert quote.pricing.shipping_quoted is None
    assert quote.pricing.total == Decimal(30000)


@pytest.mark.parametrize("courier", [Pickup(), RatedCourier(1)])
async def test_cashier_override_wins(store, two_kibble, courier):
    quote = await quote_sale(
        store,
        QuoteRequest(
            two_kibble,
            (),
            NOW,
            courier=courier,
            destination_id=BALI,
            shipping_override=Decimal(12000),
        ),
    )

    assert quote.pricing.shipping_cost == Decimal(12000)
    assert quote.pricing.total == Decimal(42000)


async def test_quote_weight_tiers_follow_cart(store):
    cart = cart_of((select(KIBBLE), 2), (select(TREATS), 1))

    quote = await quote_sale(
        store,
        QuoteRequest(cart, (), NOW, courier=RatedCourier(1), destination_id=JAWA_BARAT),
    )

    assert quote.pricing.total_weight_grams == 1000
    assert quote.pricing.shipping_cost == Decimal(20000)
