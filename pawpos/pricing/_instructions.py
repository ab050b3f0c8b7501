"""
Payment instructions for non-cash methods.
"""

from __future__ import annotations

from pawpos._types import PaymentMethod
from pawpos.config import PaymentSettings
from pawpos.pricing._types import PaymentInstructions


def payment_instructions(
    method: PaymentMethod,
    settings: PaymentSettings,
) -> PaymentInstructions | None:
    """
    What to show the customer for `method`.

    None for cash and for any method the shop has not enabled.
    """
    if method is PaymentMethod.CASH or not settings.is_enabled(method):
        return None

    match method:
        case PaymentMethod.BANK_TRANSFER:
            return PaymentInstructions(
                method=method,
                title="Bank Transfer",
                details=(
                    ("Bank", settings.bank_name),
                    ("Account Number", settings.bank_account_number),
                    ("Account Name", settings.bank_account_name),
                ),
            )
        case PaymentMethod.EWALLET:
            return PaymentInstructions(
                method=method,
                title="E-Wallet",
                details=(
                    ("Provider", settings.ewallet_provider),
                    ("Number", settings.ewallet_number),
                ),
            )
        case PaymentMethod.QRIS:
            return PaymentInstructions(
                method=method,
                title="QRIS",
                details=(
                    ("Merchant", settings.qris_name),
                    ("NMID", settings.qris_nmid),
                ),
                image=settings.qris_image or None,
            )
    return None


__all__ = ("payment_instructions",)
