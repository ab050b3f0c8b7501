"""
pawpos — checkout core for a pet-supply point of sale.

Sub-packages, leaves first:

    from pawpos import store as R        # record store protocol + adapters
    from pawpos import catalog as C      # product snapshot with variant stock
    from pawpos import cart as K         # immutable cart with stock ceilings
    from pawpos import shipping as S     # weight-tiered courier cost
    from pawpos import customers as Cu   # profile search, recipient autofill
    from pawpos import promotions as P   # best-of selection, promo codes
    from pawpos import pricing as Pr     # total, change, payment instructions
    from pawpos import checkout as Co    # verify -> order -> debit commit
    from pawpos.session import TerminalSession

Fallible operations return kungfu Result / LazyCoroResult:

    match await C.load_catalog(store):
        case Ok(catalog): ...
        case Error(e): ...
"""

from pawpos._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Lazy,
    Pure,
    Money,
    PaymentMethod,
    ZERO,
    money,
    format_idr,
)
from pawpos import store
from pawpos import catalog
from pawpos import cart
from pawpos import shipping
from pawpos import customers
from pawpos import promotions
from pawpos import pricing
from pawpos import checkout
from pawpos import session
from pawpos.config import TerminalSettings, PaymentSettings, configure_logging

__version__ = "0.1.0"

__all__ = (
    # Core types
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "Lazy",
    "Pure",
    "Money",
    "PaymentMethod",
    "ZERO",
    "money",
    "format_idr",
    # Sub-packages
    "store",
    "catalog",
    "cart",
    "shipping",
    "customers",
    "promotions",
    "pricing",
    "checkout",
    "session",
    # Config
    "TerminalSettings",
    "PaymentSettings",
    "configure_logging",
)
