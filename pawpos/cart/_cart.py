"""
Cart — ordered, immutable list of lines.

Every mutation returns a new cart; a rejected mutation returns an Error and
the caller keeps the cart it already had.

    cart = Cart()
    match cart.add_line(select(kibble)):
        case Ok(cart):
            ...
        case Error(e):
            toast(e.message)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto

from kungfu import Result, Ok, Error

from pawpos._types import Money, ProductId, VariantId, ZERO
from pawpos.cart._selection import LineKey, LineSelection

# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CartErrorKind(Enum):
    OUT_OF_STOCK = auto()
    STOCK_EXCEEDED = auto()
    UNKNOWN_LINE = auto()


@dataclass(frozen=True, slots=True)
class CartError:
    kind: CartErrorKind
    message: str
    key: LineKey


# ═══════════════════════════════════════════════════════════════════════════════
# CartLine
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One product (or variant) and its quantity.

    unit_price and available_stock are captured when the line is first added
    and never re-derived; quantity never exceeds available_stock.
    """

    selection: LineSelection
    quantity: int
    unit_price: Money
    available_stock: int

    @property
    def key(self) -> LineKey:
        return self.selection.key

    @property
    def product_id(self) -> ProductId:
        return self.selection.product.id

    @property
    def variant_id(self) -> VariantId | None:
        return self.selection.variant_id

    @property
    def display_name(self) -> str:
        return self.selection.display_name

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def weight_grams(self) -> int:
        return self.selection.unit_weight_grams * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Cart:
    lines: tuple[CartLine, ...] = ()

    # ─── queries ──────────────────────────────────────────────────────────────

    def line(self, key: LineKey) -> CartLine | None:
        return next((item for item in self.lines if item.key == key), None)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Money:
        return sum((item.line_total for item in self.lines), ZERO)

    @property
    def total_weight_grams(self) -> int:
        return sum(item.weight_grams for item in self.lines)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.lines)

    def unit_prices(self) -> list[Money]:
        """One price per unit, in line order."""
        return [item.unit_price for item in self.lines for _ in range(item.quantity)]

    # ─── mutations ────────────────────────────────────────────────────────────

    def add_line(self, selection: LineSelection) -> Result[Cart, CartError]:
        """Add one unit; an existing line with the same key is incremented instead."""
        if selection.available_stock <= 0:
            return Error(CartError(CartErrorKind.OUT_OF_STOCK, "Out of stock", selection.key))

        if self.line(selection.key) is not None:
            return self.change_quantity(selection.key, 1)

        line = CartLine(
            selection=selection,
            quantity=1,
            unit_price=selection.unit_price,
            available_stock=selection.available_stock,
        )
        return Ok(Cart((*self.lines, line)))

    def change_quantity(self, key: LineKey, delta: int) -> Result[Cart, CartError]:
        """
        Adjust a line by delta against its captured stock ceiling.

        Dropping to zero or below removes the line. Stock is not re-read here;
        concurrent sales are caught at checkout.
        """
        current = self.line(key)
        if current is None:
            return Error(CartError(CartErrorKind.UNKNOWN_LINE, "Item is not in the cart", key))

        quantity = current.quantity + delta
        if quantity <= 0:
            return Ok(self.remove_line(key))
        if quantity > current.available_stock:
            return Error(
                CartError(
                    CartErrorKind.STOCK_EXCEEDED,
                    f"Not enough stock. Only {current.available_stock} available.",
                    key,
                )
            )

        return Ok(
            Cart(
                tuple(
                    replace(item, quantity=quantity) if item.key == key else item
                    for item in self.lines
                )
            )
        )

    def remove_line(self, key: LineKey) -> Cart:
        return Cart(tuple(item for item in self.lines if item.key != key))

    def clear(self) -> Cart:
        return Cart()


__all__ = ("CartErrorKind", "CartError", "CartLine", "Cart")
