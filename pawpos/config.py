"""
Configuration — terminal and payment settings.

    from pawpos.config import TerminalSettings, configure_logging

    settings = TerminalSettings.from_env()
    configure_logging(settings)

Environment variables (all optional), also read from a dotenv file:

    PAWPOS_DATABASE_URL         sqlalchemy async URL
    PAWPOS_LOG_LEVEL            DEBUG / INFO / WARNING / ERROR
    PAWPOS_CASHIER_ID           recorded on every order
    PAWPOS_CASHIER_NAME
    PAWPOS_PAYMENT__BANK_TRANSFER_ENABLED   true/false
    PAWPOS_PAYMENT__BANK_NAME, PAWPOS_PAYMENT__BANK_ACCOUNT_NUMBER, PAWPOS_PAYMENT__BANK_ACCOUNT_NAME
    PAWPOS_PAYMENT__EWALLET_ENABLED         true/false
    PAWPOS_PAYMENT__EWALLET_PROVIDER, PAWPOS_PAYMENT__EWALLET_NUMBER
    PAWPOS_PAYMENT__QRIS_ENABLED            true/false
    PAWPOS_PAYMENT__QRIS_IMAGE, PAWPOS_PAYMENT__QRIS_NAME, PAWPOS_PAYMENT__QRIS_NMID

Empty values are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pawpos._types import PaymentMethod

ENV_PREFIX = "PAWPOS_"

# ═══════════════════════════════════════════════════════════════════════════════
# Payment Settings
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentSettings(BaseModel):
    """Which non-cash methods the till accepts, and what to show the customer."""

    model_config = ConfigDict(frozen=True)

    bank_transfer_enabled: bool = False
    bank_name: str = ""
    bank_account_number: str = ""
    bank_account_name: str = ""

    ewallet_enabled: bool = False
    ewallet_provider: str = ""
    ewallet_number: str = ""

    qris_enabled: bool = False
    qris_image: str = ""
    qris_name: str = ""
    qris_nmid: str = ""

    def is_enabled(self, method: PaymentMethod) -> bool:
        match method:
            case PaymentMethod.CASH:
                return True
            case PaymentMethod.BANK_TRANSFER:
                return self.bank_transfer_enabled
            case PaymentMethod.EWALLET:
                return self.ewallet_enabled
            case PaymentMethod.QRIS:
                return self.qris_enabled

    @property
    def enabled_methods(self) -> tuple[PaymentMethod, ...]:
        return tuple(m for m in PaymentMethod if self.is_enabled(m))


# ═══════════════════════════════════════════════════════════════════════════════
# Terminal Settings
# ═══════════════════════════════════════════════════════════════════════════════

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TerminalSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    database_url: str = "sqlite+aiosqlite:///:memory:"
    log_level: str = "INFO"
    cashier_id: str | None = None
    cashier_name: str | None = None
    payment: PaymentSettings = Field(default_factory=PaymentSettings)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> TerminalSettings:
        """
        Settings from PAWPOS_* variables, plus `env_file` when given.
        Process variables win over the file.

        Raises pydantic.ValidationError on malformed values.
        """
        return cls(_env_file=env_file)  # type: ignore[call-arg]


# ═══════════════════════════════════════════════════════════════════════════════
# Logging
# ═══════════════════════════════════════════════════════════════════════════════


def configure_logging(settings: TerminalSettings | None = None) -> None:
    """Install a basic stderr handler. Library modules only create loggers."""
    level = settings.log_level if settings is not None else "INFO"
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ENV_PREFIX",
    "PaymentSettings",
    "TerminalSettings",
    "configure_logging",
)
