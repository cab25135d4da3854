"""
trip.py — One-call settlement of a trip snapshot

    trip = Trip("t1", "Lisbon", participants, expenses, base_currency="EUR")
    settlement = settle_trip(trip, default_rate_table())

    for debt in settlement.debts:
        print(debt)

The snapshot is read, never modified; the trip store keeps ownership of the
participants and expenses.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import DEFAULT_CONFIG, LedgerConfig
from .currency import convert_money
from .ledger import BalanceStatus, balance_status, compute_balances
from .models import Expense, Participant
from .money import Money, Number, money_sum
from .settlement import Debt, simplify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trip:
    """Snapshot of a trip as supplied by the trip store."""
    id: str
    name: str
    participants: tuple[Participant, ...]
    expenses: tuple[Expense, ...] = ()
    base_currency: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "participants", tuple(self.participants))
        object.__setattr__(self, "expenses", tuple(self.expenses))
        ids = [p.id for p in self.participants]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Trip {self.id!r} has duplicate participant ids")

    @property
    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]

    def participant(self, participant_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def currency(self, config: Optional[LedgerConfig] = None) -> str:
        """Base currency of the trip, or the configured reference currency."""
        return self.base_currency or (config or DEFAULT_CONFIG).reference_currency


@dataclass(frozen=True)
class Settlement:
    """Balances and transfers of one trip, in one currency."""
    currency: str
    balances: Mapping[str, Money]
    debts: tuple[Debt, ...] = field(default_factory=tuple)

    @property
    def is_settled(self) -> bool:
        return not self.debts

    def statuses(self, config: Optional[LedgerConfig] = None) -> Dict[str, BalanceStatus]:
        return {pid: balance_status(b, config) for pid, b in self.balances.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "balances": {pid: b.to_dict() for pid, b in self.balances.items()},
            "debts": [d.to_dict() for d in self.debts],
        }


def settle_trip(
    trip: Trip,
    rate_table: Mapping[str, Number],
    config: Optional[LedgerConfig] = None,
) -> Settlement:
    """Balances of every participant and the transfers that settle them."""
    config = config or DEFAULT_CONFIG
    currency = trip.currency(config)
    balances = compute_balances(
        trip.expenses, currency, rate_table, trip.participant_ids, config
    )
    debts = simplify(balances, config)
    logger.info(
        "Trip %r: %d expenses, %d transfers in %s",
        trip.id, len(trip.expenses), len(debts), currency,
    )
    return Settlement(currency, balances, tuple(debts))


def total_cost(
    trip: Trip,
    rate_table: Mapping[str, Number],
    config: Optional[LedgerConfig] = None,
) -> Money:
    """Sum of every expense, converted to the trip currency."""
    config = config or DEFAULT_CONFIG
    currency = trip.currency(config)
    converted = [
        convert_money(e.amount, currency, rate_table, config.rounding)
        for e in trip.expenses
    ]
    return money_sum(converted, currency)


def average_per_person(
    trip: Trip,
    rate_table: Mapping[str, Number],
    config: Optional[LedgerConfig] = None,
) -> Money:
    """
    Total cost divided by the number of participants, rounded down to the
    minor unit. Zero for a trip without participants.
    """
    total = total_cost(trip, rate_table, config)
    if not trip.participants:
        return Money.zero(total.currency)
    return Money.of_minor(total.minor_units // len(trip.participants), total.currency)
