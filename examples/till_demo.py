"""
Till demo — one terminal session against an in-memory store.

Sale 1: two bags of kibble for a registered customer, JNE, paid cash.
Sale 2: another till empties the shelf before commit (clean abort).
Sale 3: the store drops out mid debit (partial commit, reconcile by hand).

    python examples/till_demo.py
"""

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from kungfu import Ok, Error

from pawpos import PaymentMethod, format_idr, configure_logging, TerminalSettings
from pawpos.config import PaymentSettings
from pawpos.session import TerminalSession
from pawpos.shipping import Destination, RatedCourier, Pickup
from pawpos.store import (
    MemoryRecordStore,
    Product,
    Variant,
    StockKind,
    Courier,
    ShippingRate,
    Province,
    CustomerProfile,
    Promotion,
    DiscountType,
)

JAWA_BARAT = Destination(11, "Jawa Barat")


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def seed() -> MemoryRecordStore:
    store = MemoryRecordStore()
    store.add_product(
        Product("kibble", "Royal Kibble 400g", Decimal(15000), stock_quantity=10, unit_weight_grams=400)
    )
    store.add_product(
        Product(
            "collar",
            "Cat Collar",
            Decimal(20000),
            stock_quantity=5,
            unit_weight_grams=100,
            has_variants=True,
        ),
        Variant("collar-red", "collar", "Red", Decimal(0), stock_quantity=0),
        Variant("collar-blue", "collar", "Blue", Decimal(5000), stock_quantity=3),
    )
    store.add_product(
        Product("treats", "Chicken Treats", Decimal(10000), stock_quantity=2, unit_weight_grams=200)
    )
    store.add_courier(Courier(1, "JNE"), ShippingRate(1, JAWA_BARAT.id, Decimal(20000), "2-3"))
    store.add_province(Province(JAWA_BARAT.id, JAWA_BARAT.name), Province(51, "Bali"))
    store.add_profile(
        CustomerProfile(
            "u-1",
            user_name="Budi Santoso",
            user_phone="081234567890",
            recipient_address_line1="Jl. Merdeka 1, Bandung",
            recipient_province_id=JAWA_BARAT.id,
        )
    )
    store.add_promotion(
        Promotion(
            "weekend",
            "WEEKEND5",
            DiscountType.PERCENTAGE,
            Decimal(5),
            min_purchase_amount=Decimal(60000),
            end_date=datetime.now(UTC) + timedelta(days=2),
        )
    )
    return store


def show(session: TerminalSession) -> None:
    p = session.pricing
    for line in session.cart.lines:
        print(f"  {line.quantity} x {line.display_name:<24} {format_idr(line.line_total):>12}")
    print(f"  {'Subtotal':<28} {format_idr(p.subtotal):>12}")
    if p.promotion is not None:
        print(f"  {'Discount (' + p.promotion.code + ')':<28} {format_idr(-p.discount):>12}")
    shipping = "-" if p.shipping_quoted is None else format_idr(p.shipping_cost)
    print(f"  {'Shipping (' + str(p.total_weight_grams) + ' g)':<28} {shipping:>12}")
    print(f"  {'Total':<28} {format_idr(p.total):>12}")


async def fill_form(session: TerminalSession) -> None:
    await session.set_shipping(RatedCourier(1), JAWA_BARAT)
    session.update_details(
        recipient_name="Budi Santoso",
        recipient_phone="081234567890",
        recipient_address="Jl. Merdeka 1, Bandung",
    )


async def main() -> None:
    settings = TerminalSettings(
        log_level="WARNING",
        cashier_id="c-1",
        cashier_name="Sari",
        payment=PaymentSettings(qris_enabled=True, qris_name="Toko Hewan", qris_nmid="ID1020"),
    )
    configure_logging(settings)

    store = seed()
    session = TerminalSession(store, settings)
    match await session.start():
        case Ok(catalog):
            print(f"Catalog: {len(catalog)} products")
            for entry in catalog:
                status = "out of stock" if entry.is_out_of_stock else f"{entry.total_stock} in stock"
                print(f"  {entry.name:<24} {status}")
        case Error(e):
            print(f"✗ {e.message}")
            return

    # ─── Sale 1 ───────────────────────────────────────────────────────────────
    banner("Sale 1: kibble by JNE, cash")
    await session.add(session.select("kibble"))
    await session.add(session.select("kibble"))
    await session.set_shipping(RatedCourier(1))
    match await session.search_customers("budi"):
        case Ok([profile, *_]):
            await session.fill_from_profile(profile)
            print(f"  Customer {profile.user_name}, ships to {session.details.destination.name}")
        case _:
            await fill_form(session)
    show(session)

    session.enter_cash(Decimal(100000))
    print(f"  Cash {format_idr(Decimal(100000))}, change {format_idr(session.change)}")
    match await session.checkout():
        case Ok(receipt):
            print(f"✓ Order #{receipt.short_id} completed")
        case Error(e):
            print(f"✗ {e.message}")

    # ─── Sale 2 ───────────────────────────────────────────────────────────────
    banner("Sale 2: treats sold out at another till")
    await session.add(session.select("treats"))
    await session.add(session.select("treats"))
    await session.set_shipping(Pickup(), JAWA_BARAT)
    session.update_details(recipient_name="Ani", recipient_phone="0813", recipient_address="Toko")
    instructions = session.select_payment(PaymentMethod.QRIS)
    print(f"  Pay by {instructions.title}: {dict(instructions.details)}")
    show(session)

    await store.set_stock(StockKind.PRODUCT, "treats", 1)
    match await session.checkout():
        case Ok(receipt):
            print(f"✓ Order #{receipt.short_id} completed")
        case Error(e):
            print(f"✗ {e.message}")
            print(f"  Writes started: {e.writes_started}")
    await session.clear_cart()

    # ─── Sale 3 ───────────────────────────────────────────────────────────────
    banner("Sale 3: store fails during stock debit")
    await session.add(session.select("kibble"))
    await session.add(session.select("collar", "collar-blue"))
    await session.add(session.select("collar", "collar-blue"))
    await fill_form(session)
    show(session)

    session.select_payment(PaymentMethod.CASH)
    session.enter_cash(Decimal(200000))
    store.fail("set_stock", after=1)
    match await session.checkout():
        case Ok(receipt):
            print(f"✓ Order #{receipt.short_id} completed")
        case Error(e) if e.requires_reconciliation:
            print(f"✗ {e.message}")
            for debit in e.debited:
                print(f"  debited: {debit.display_name} {debit.before} -> {debit.after}")
            for key in e.pending:
                print(f"  not debited: {key}")
        case Error(e):
            print(f"✗ {e.message}")


if __name__ == "__main__":
    asyncio.run(main())
