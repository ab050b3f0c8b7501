"""
Shipping form choices — active destinations and couriers, by name.

    match await load_shipping_options(store):
        case Ok(options):
            options.destination(11)   # Destination(11, "Jawa Barat")
        case Error(e):
            toast(e.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult
from combinators import lift as L

from pawpos._types import DestinationId
from pawpos.shipping._types import Destination, ShippingErrorKind, ShippingError
from pawpos.store._records import Courier

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShippingOptions:
    destinations: tuple[Destination, ...] = ()
    couriers: tuple[Courier, ...] = ()

    def destination(self, destination_id: DestinationId) -> Destination | None:
        return next((d for d in self.destinations if d.id == destination_id), None)


def load_shipping_options(store: RecordStore) -> LazyCoroResult[ShippingOptions, ShippingError]:
    async def fetch() -> ShippingOptions:
        provinces = await store.list_destinations()
        couriers = await store.list_active_couriers()
        logger.debug("loaded %d destinations, %d couriers", len(provinces), len(couriers))
        return ShippingOptions(
            destinations=tuple(Destination(p.id, p.province_name) for p in provinces),
            couriers=tuple(couriers),
        )

    def on_error(exc: Exception) -> ShippingError:
        logger.warning("shipping options load failed: %s", exc)
        return ShippingError(
            ShippingErrorKind.STORE_UNAVAILABLE, f"Failed to load provinces and couriers: {exc}"
        )

    return L.catching_async(fetch, on_error=on_error)


__all__ = ("ShippingOptions", "load_shipping_options")
