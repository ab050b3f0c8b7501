"""
Customers — registered-customer search for the recipient form.

    from pawpos import customers as Cu

    profiles = (await Cu.search_profiles(store, "0812")).unwrap()
    fill = Cu.autofill(profiles[0])
"""

from pawpos.customers._types import RecipientAutofill, CustomerLookupError
from pawpos.customers._lookup import (
    MIN_QUERY_LENGTH,
    MAX_RESULTS,
    search_profiles,
    autofill,
)

__all__ = (
    "RecipientAutofill",
    "CustomerLookupError",
    "MIN_QUERY_LENGTH",
    "MAX_RESULTS",
    "search_profiles",
    "autofill",
)
