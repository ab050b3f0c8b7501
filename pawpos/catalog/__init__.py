"""
Catalog — snapshot of sellable products.

    from pawpos import catalog as C

    match await C.load_catalog(store):
        case Ok(catalog):
            for entry in catalog.search("kibble"):
                print(entry.name, entry.total_stock, entry.is_out_of_stock)
        case Error(e):
            print(e.message)
"""

from pawpos.catalog._types import CatalogEntry, Catalog, CatalogLoadError
from pawpos.catalog._loader import load_catalog

__all__ = (
    "CatalogEntry",
    "Catalog",
    "CatalogLoadError",
    "load_catalog",
)
