"""
Customer lookup types.
"""

from __future__ import annotations

from dataclasses import dataclass

from pawpos._types import DestinationId


@dataclass(frozen=True, slots=True)
class RecipientAutofill:
    """Recipient fields taken from a profile. No destination leaves the form's as is."""

    recipient_name: str
    recipient_phone: str
    recipient_address: str
    destination_id: DestinationId | None = None


@dataclass(frozen=True, slots=True)
class CustomerLookupError:
    message: str


__all__ = ("RecipientAutofill", "CustomerLookupError")
