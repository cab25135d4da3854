"""
travelsplit — Ledger & settlement engine for shared trip expenses

Converts multi-currency expenses into one reference currency, keeps each
participant's net balance and computes the transfers that settle them.

================================================================================
QUICK START
================================================================================

    from travelsplit import Money, default_rate_table, equal_expense
    from travelsplit import compute_balances, simplify

    rates = default_rate_table()                  # USD-anchored static table
    dinner = equal_expense("e1", "ana", Money.of(90, "USD"), ["ana", "ben", "cy"])

    balances = compute_balances([dinner], "USD", rates, ["ana", "ben", "cy"])
    # {'ana': 60.00 USD, 'ben': -30.00 USD, 'cy': -30.00 USD}

    simplify(balances)
    # [Debt(debtor='ben', creditor='ana', amount=30.00 USD),
    #  Debt(debtor='cy', creditor='ana', amount=30.00 USD)]

Whole trip at once:

    from travelsplit import Trip, settle_trip

    settlement = settle_trip(trip, rates)
    settlement.balances, settlement.debts

================================================================================
"""

import logging

from .config import DEFAULT_CONFIG, LedgerConfig
from .currency import (
    CURRENCY_SYMBOLS,
    DEFAULT_RATES,
    RateTable,
    convert,
    convert_money,
    currency_symbol,
    default_rate_table,
)
from .errors import (
    LedgerError,
    ShareSumMismatch,
    UnknownCurrency,
    UnknownParticipant,
    ZeroParticipants,
)
from .ledger import BalanceStatus, balance_status, compute_balances
from .models import Expense, ExpenseCategory, ExpenseShare, Participant
from .money import Money, RoundingMode
from .settlement import Debt, apply_debts, net_positions, simplify
from .splitter import custom_expense, equal_expense, split_custom, split_equal
from .trip import Settlement, Trip, average_per_person, settle_trip, total_cost

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Money
    "Money",
    "RoundingMode",
    # Configuration
    "LedgerConfig",
    "DEFAULT_CONFIG",
    # Currency
    "RateTable",
    "DEFAULT_RATES",
    "CURRENCY_SYMBOLS",
    "convert",
    "convert_money",
    "currency_symbol",
    "default_rate_table",
    # Errors
    "LedgerError",
    "UnknownCurrency",
    "ShareSumMismatch",
    "UnknownParticipant",
    "ZeroParticipants",
    # Data model
    "Participant",
    "Expense",
    "ExpenseShare",
    "ExpenseCategory",
    # Splitter
    "split_equal",
    "split_custom",
    "equal_expense",
    "custom_expense",
    # Ledger
    "compute_balances",
    "balance_status",
    "BalanceStatus",
    # Settlement
    "Debt",
    "simplify",
    "apply_debts",
    "net_positions",
    # Trip
    "Trip",
    "Settlement",
    "settle_trip",
    "total_cost",
    "average_per_person",
]
