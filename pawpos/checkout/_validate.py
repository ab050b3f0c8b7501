"""
Checkout form validation.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from pawpos.shipping import ManualCourier
from pawpos.checkout._types import CheckoutDetails, CheckoutErrorKind, CheckoutError


def _invalid(message: str) -> Error[CheckoutError]:
    return Error(CheckoutError(CheckoutErrorKind.VALIDATION, message))


def validate_details(details: CheckoutDetails) -> Result[CheckoutDetails, CheckoutError]:
    """First missing field wins. Nothing is written on failure."""
    if not details.recipient_name.strip():
        return _invalid("Please enter recipient name")
    if not details.recipient_phone.strip():
        return _invalid("Please enter phone number")
    if details.destination is None:
        return _invalid("Please select province")
    if not details.recipient_address.strip():
        return _invalid("Please enter delivery address")
    if details.courier is None:
        return _invalid("Please select shipping courier")
    if isinstance(details.courier, ManualCourier) and not details.courier.name.strip():
        return _invalid("Please enter courier name")
    return Ok(details)


__all__ = ("validate_details",)
