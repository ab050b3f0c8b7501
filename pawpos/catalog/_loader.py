"""
Catalog loader — active products with their variants.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult
from combinators import lift as L

from pawpos.catalog._types import Catalog, CatalogEntry, CatalogLoadError
from pawpos.store._records import Variant

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)


def load_catalog(store: RecordStore) -> LazyCoroResult[Catalog, CatalogLoadError]:
    """
    Fetch all active products, then every variant of variant-bearing ones.

    Example:
        match await load_catalog(store):
            case Ok(catalog):
                show(catalog)
            case Error(e):
                show_empty_state(e.message)  # cashier may retry
    """

    async def fetch() -> Catalog:
        products = await store.list_active_products()
        variant_owners = [p.id for p in products if p.has_variants]

        by_product: dict[str, list[Variant]] = defaultdict(list)
        if variant_owners:
            for v in await store.list_variants_for_products(variant_owners):
                by_product[v.product_id].append(v)

        catalog = Catalog(
            tuple(CatalogEntry(p, tuple(by_product.get(p.id, ()))) for p in products)
        )
        logger.debug(
            "catalog loaded: %d products, %d with variants",
            len(catalog),
            len(variant_owners),
        )
        return catalog

    def on_error(exc: Exception) -> CatalogLoadError:
        logger.warning("catalog load failed: %s", exc)
        return CatalogLoadError(f"Failed to load products: {exc}")

    return L.catching_async(fetch, on_error=on_error)


__all__ = ("load_catalog",)
