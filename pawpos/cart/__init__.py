"""
Cart — in-progress sale.

    from pawpos import cart as K

    cart = K.Cart()
    cart = cart.add_line(K.select(product, variant)).unwrap()
    cart = cart.change_quantity((product.id, variant.id), +2).unwrap_or(cart)

    cart.subtotal, cart.total_weight_grams
"""

from pawpos.cart._selection import (
    LineKey,
    BaseProduct,
    VariantOf,
    LineSelection,
    select,
)
from pawpos.cart._cart import (
    CartErrorKind,
    CartError,
    CartLine,
    Cart,
)

__all__ = (
    # Selection
    "LineKey",
    "BaseProduct",
    "VariantOf",
    "LineSelection",
    "select",
    # Cart
    "CartErrorKind",
    "CartError",
    "CartLine",
    "Cart",
)
