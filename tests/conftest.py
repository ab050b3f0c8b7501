from datetime import UTC, datetime
from decimal import Decimal

import pytest

from pawpos.store import (
    MemoryRecordStore,
    Product,
    Variant,
    Courier,
    CustomerProfile,
    Province,
    ShippingRate,
)
from pawpos.cart import Cart, select

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=UTC)

JAWA_BARAT = 11
BALI = 51

KIBBLE = Product("kibble", "Royal Kibble 400g", Decimal(15000), stock_quantity=10, unit_weight_grams=400)
COLLAR = Product(
    "collar",
    "Cat Collar",
    Decimal(20000),
    stock_quantity=5,
    unit_weight_grams=100,
    has_variants=True,
    category_id="accessories",
)
COLLAR_RED = Variant("collar-red", "collar", "Red", Decimal(0), stock_quantity=0)
COLLAR_BLUE = Variant("collar-blue", "collar", "Blue", Decimal(5000), stock_quantity=3, weight_grams=150)
TREATS = Product(
    "treats",
    "Chicken Treats",
    Decimal(10000),
    stock_quantity=2,
    unit_weight_grams=200,
    category_id="snacks",
)
SAND = Product("sand", "Cat Sand 5L", Decimal(45000), stock_quantity=0, unit_weight_grams=5000)
RETIRED = Product("retired", "Old Shampoo", Decimal(9000), stock_quantity=4, is_active=False)

JNE = Courier(1, "JNE")
SICEPAT = Courier(2, "SiCepat", is_active=False)
ANTERAJA = Courier(3, "AnterAja")

PROVINCES = (
    Province(JAWA_BARAT, "Jawa Barat"),
    Province(BALI, "Bali"),
    Province(31, "DKI Jakarta", is_active=False),
)

BUDI = CustomerProfile(
    "u-budi",
    user_name="Budi Santoso",
    user_phone="081234567890",
    recipient_name="Ibu Sri",
    recipient_phone="089900001111",
    recipient_address_line1="Jl. Sunset Road 8, Kuta",
    recipient_province_id=BALI,
    address_line1="Jl. Merdeka 1, Bandung",
    province_id=JAWA_BARAT,
)
ANI = CustomerProfile(
    "u-ani",
    user_name="Ani",
    user_phone="081377700000",
    address_line1="Jl. Asia Afrika 5, Bandung",
    province_id=JAWA_BARAT,
)


def clock() -> datetime:
    return NOW


@pytest.fixture
def store():
    store = MemoryRecordStore(clock=clock)
    store.add_product(KIBBLE)
    store.add_product(COLLAR, COLLAR_RED, COLLAR_BLUE)
    store.add_product(TREATS)
    store.add_product(SAND)
    store.add_product(RETIRED)
    store.add_courier(JNE, ShippingRate(1, JAWA_BARAT, Decimal(20000), "2-3"))
    store.add_courier(SICEPAT, ShippingRate(2, JAWA_BARAT, Decimal(18000)))
    store.add_courier(ANTERAJA)
    store.add_province(*PROVINCES)
    store.add_profile(BUDI, ANI)
    return store


def cart_of(*items) -> Cart:
    """Cart from (selection, quantity) pairs."""
    cart = Cart()
    for selection, quantity in items:
        for _ in range(quantity):
            cart = cart.add_line(selection).unwrap()
    return cart


@pytest.fixture
def two_kibble() -> Cart:
    return cart_of((select(KIBBLE), 2))
