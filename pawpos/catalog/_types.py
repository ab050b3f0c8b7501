"""
Catalog types.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from pawpos._types import ProductId, VariantId
from pawpos.store._records import Product, Variant

# ═══════════════════════════════════════════════════════════════════════════════
# CatalogEntry — Product + Variants
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    A product as the till shows it, with every variant attached.

    Zero-stock variants stay in the list so the cashier sees
    "out of stock" instead of a missing option.
    """

    product: Product
    variants: tuple[Variant, ...] = ()

    @property
    def id(self) -> ProductId:
        return self.product.id

    @property
    def name(self) -> str:
        return self.product.name

    @property
    def total_stock(self) -> int:
        # The base pool stays sellable on variant products.
        if not self.product.has_variants:
            return self.product.stock_quantity
        return self.product.stock_quantity + sum(v.stock_quantity for v in self.variants)

    @property
    def is_out_of_stock(self) -> bool:
        if self.product.has_variants:
            return (
                not any(v.stock_quantity > 0 for v in self.variants)
                and self.product.stock_quantity <= 0
            )
        return self.product.stock_quantity <= 0

    def variant(self, variant_id: VariantId) -> Variant | None:
        return next((v for v in self.variants if v.id == variant_id), None)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog — Snapshot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable snapshot of active products, in store order."""

    entries: tuple[CatalogEntry, ...] = ()

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, product_id: ProductId) -> CatalogEntry | None:
        return next((e for e in self.entries if e.id == product_id), None)

    def search(self, query: str = "", category_id: str | None = None) -> list[CatalogEntry]:
        """Case-insensitive name match plus optional category; stock is not filtered."""
        needle = query.strip().casefold()
        return [
            e
            for e in self.entries
            if needle in e.name.casefold()
            and (category_id is None or e.product.category_id == category_id)
        ]


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CatalogLoadError:
    """Products or variants could not be fetched. No partial catalog is kept."""

    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("CatalogEntry", "Catalog", "CatalogLoadError")
