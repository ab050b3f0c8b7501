"""
Checkout — validate the form, then commit the sale.

    from pawpos import checkout as Co

    details = Co.CheckoutDetails(recipient_name="Budi", ...)
    Co.validate_details(details)                      # Result

    receipt = await Co.commit_checkout(store, Co.CheckoutRequest(...))

Phases: 1) re-read stock for every line, abort on any shortfall;
2) insert order and lines; 3) per line, re-read stock and write it back
reduced. Failure in phase 3 leaves the order and earlier debits in place.
"""

from pawpos.checkout._types import (
    CheckoutDetails,
    CheckoutRequest,
    Shortfall,
    StockDebit,
    CheckoutReceipt,
    CheckoutErrorKind,
    CheckoutError,
)
from pawpos.checkout._validate import validate_details
from pawpos.checkout._phases import (
    stock_ref,
    verify_stock,
    order_fields,
    order_lines,
    write_order,
    debit_stock,
)
from pawpos.checkout._commit import NOTIFICATION_TITLE, commit_checkout

__all__ = (
    # Types
    "CheckoutDetails",
    "CheckoutRequest",
    "Shortfall",
    "StockDebit",
    "CheckoutReceipt",
    "CheckoutErrorKind",
    "CheckoutError",
    # Validation
    "validate_details",
    # Phases
    "stock_ref",
    "verify_stock",
    "order_fields",
    "order_lines",
    "write_order",
    "debit_stock",
    # Commit
    "NOTIFICATION_TITLE",
    "commit_checkout",
)
