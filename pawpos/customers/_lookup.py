"""
Customer lookup — find a registered customer and prefill the recipient form.

    match await search_profiles(store, "budi"):
        case Ok(profiles):
            fill = autofill(profiles[0])
        case Error(e):
            toast(e.message)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kungfu import LazyCoroResult
from combinators import lift as L

from pawpos.store._records import CustomerProfile
from pawpos.customers._types import RecipientAutofill, CustomerLookupError

if TYPE_CHECKING:
    from pawpos.store._protocol import RecordStore

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10


def search_profiles(
    store: RecordStore,
    query: str,
    limit: int = MAX_RESULTS,
) -> LazyCoroResult[list[CustomerProfile], CustomerLookupError]:
    """
    Profiles matching a name or phone fragment, at most `limit`.

    Fewer than two characters gives an empty list without a store call.
    """
    needle = query.strip()
    if len(needle) < MIN_QUERY_LENGTH:
        return L.pure([])

    def on_error(exc: Exception) -> CustomerLookupError:
        logger.warning("profile search failed: %s", exc)
        return CustomerLookupError(f"Failed to search customers: {exc}")

    async def fetch() -> list[CustomerProfile]:
        found = await store.search_customer_profiles(needle, limit=limit)
        return found[:limit]

    return L.catching_async(fetch, on_error=on_error)


def autofill(profile: CustomerProfile) -> RecipientAutofill:
    """
    Saved recipient first, account fields second. The phone is always the
    account phone; the destination only comes from the saved recipient.
    """
    return RecipientAutofill(
        recipient_name=profile.recipient_name or profile.user_name or "",
        recipient_phone=profile.user_phone or "",
        recipient_address=profile.recipient_address_line1 or profile.address_line1 or "",
        destination_id=profile.recipient_province_id,
    )


__all__ = ("MIN_QUERY_LENGTH", "MAX_RESULTS", "search_profiles", "autofill")
