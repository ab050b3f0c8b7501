"""
Line selection — what a cart line sells.

A line sells either the product's own base stock or one of its variants.
Price, stock and weight resolution live on each case, so nothing downstream
checks for a missing variant.
"""

from __future__ import annotations

from dataclasses import dataclass

from pawpos._types import Money, ProductId, VariantId
from pawpos.store._records import Product, Variant

type LineKey = tuple[ProductId, VariantId | None]
"""Identity of a cart line: same product and same variant (or none)."""


@dataclass(frozen=True, slots=True)
class BaseProduct:
    product: Product

    @property
    def key(self) -> LineKey:
        return (self.product.id, None)

    @property
    def variant_id(self) -> VariantId | None:
        return None

    @property
    def unit_price(self) -> Money:
        return self.product.base_price

    @property
    def available_stock(self) -> int:
        return self.product.stock_quantity

    @property
    def unit_weight_grams(self) -> int:
        return self.product.unit_weight_grams or 0

    @property
    def display_name(self) -> str:
        return self.product.name


@dataclass(frozen=True, slots=True)
class VariantOf:
    product: Product
    variant: Variant

    @property
    def key(self) -> LineKey:
        return (self.product.id, self.variant.id)

    @property
    def variant_id(self) -> VariantId | None:
        return self.variant.id

    @property
    def unit_price(self) -> Money:
        return self.product.base_price + self.variant.price_adjustment

    @property
    def available_stock(self) -> int:
        return self.variant.stock_quantity

    @property
    def unit_weight_grams(self) -> int:
        if self.variant.weight_grams is not None:
            return self.variant.weight_grams
        return self.product.unit_weight_grams or 0

    @property
    def display_name(self) -> str:
        return f"{self.product.name} - {self.variant.variant_name}"


type LineSelection = BaseProduct | VariantOf


def select(product: Product, variant: Variant | None = None) -> LineSelection:
    """Build a selection from a product and an optional variant."""
    if variant is None:
        return BaseProduct(product)
    if variant.product_id != product.id:
        raise ValueError(f"variant {variant.id} does not belong to product {product.id}")
    return VariantOf(product, variant)


__all__ = ("LineKey", "BaseProduct", "VariantOf", "LineSelection", "select")
