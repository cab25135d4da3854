"""
settlement.py — Reduce net balances to a list of settling transfers

================================================================================
ALGORITHM (greedy extremal matching)
================================================================================

    while True:
        creditor = participant with the largest positive residue
        debtor   = participant with the most negative residue
        if creditor <= epsilon or debtor >= -epsilon: stop
        transfer = min(creditor, -debtor)
        emit Debt(debtor -> creditor, transfer)
        creditor -= transfer; debtor += transfer

Ties on the residue go to the lexicographically smallest participant id, so
the output is reproducible across runs and platforms.

Each round zeroes at least one residue: at most n - 1 transfers for n
participants. Residues only change for the two participants of a round, so
two heaps give the extremes in O(log n) per round.

================================================================================
KNOWN LIMITATION
================================================================================

The result is NOT always the smallest possible number of transfers; finding
that minimum is NP-hard in general. For balances +50, +50, -30, -70 some
matchings of subsets need fewer transfers than the greedy rule produces.
The output follows the greedy rule above exactly, tie-breaks included.

The loop stops as soon as one side is within epsilon, so the other side may
keep a residue larger than epsilon: with epsilon 0.01, balances +0.01, +0.01,
-0.02 produce no transfer. A leftover debt is at most (n - 1) * epsilon.

================================================================================
"""

from __future__ import annotations
import heapq
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from .config import DEFAULT_CONFIG, LedgerConfig
from .errors import UnknownParticipant
from .money import Money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Debt:
    """A single payment `debtor` -> `creditor`. The amount is always positive."""
    debtor: str
    creditor: str
    amount: Money

    def __post_init__(self) -> None:
        if not self.amount.is_positive():
            raise ValueError(f"Debt amount must be positive, got {self.amount}")
        if self.debtor == self.creditor:
            raise ValueError(f"Debt from {self.debtor!r} to itself")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.debtor,
            "to": self.creditor,
            "amount": self.amount.to_dict(),
        }

    def __str__(self) -> str:
        return f"{self.debtor} -> {self.creditor}: {self.amount}"


def _single_currency(balances: Mapping[str, Money]) -> str:
    currencies = sorted({m.currency for m in balances.values()})
    if len(currencies) != 1:
        raise TypeError(
            f"Balances must share one currency, got: {', '.join(currencies)}"
        )
    return currencies[0]


def simplify(
    balances: Mapping[str, Money],
    config: Optional[LedgerConfig] = None,
) -> list[Debt]:
    """
    Transfers that settle `balances`, in the order they were generated.

    `balances` is not modified. Residues within the configured tolerance count
    as settled.

    Raises:
        TypeError: if the balances are in more than one currency
    """
    if not balances:
        return []

    config = config or DEFAULT_CONFIG
    currency = _single_currency(balances)
    epsilon = config.tolerance_units(currency)

    # Heap entries are (key, id): the smallest key is the most extreme
    # residue and equal keys fall back to id order.
    creditors = [(-m.minor_units, pid) for pid, m in balances.items() if m.is_positive()]
    debtors = [(m.minor_units, pid) for pid, m in balances.items() if m.is_negative()]
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    debts: list[Debt] = []
    while creditors and debtors:
        credit = -creditors[0][0]
        debt = debtors[0][0]
        if credit <= epsilon or debt >= -epsilon:
            break

        _, creditor = heapq.heappop(creditors)
        _, debtor = heapq.heappop(debtors)

        transfer = min(credit, -debt)
        debts.append(Debt(debtor, creditor, Money.of_minor(transfer, currency)))

        if credit - transfer > 0:
            heapq.heappush(creditors, (-(credit - transfer), creditor))
        if debt + transfer < 0:
            heapq.heappush(debtors, (debt + transfer, debtor))

    logger.debug(
        "Settled %d balances in %s with %d transfers",
        len(balances), currency, len(debts),
    )
    return debts


def apply_debts(
    balances: Mapping[str, Money],
    debts: Iterable[Debt],
) -> dict[str, Money]:
    """
    New balances after every debt is paid: the debtor's balance rises, the
    creditor's falls. After simplify()'s transfers only residues the loop
    stopped on remain.
    """
    updated = dict(balances)
    for debt in debts:
        for pid in (debt.debtor, debt.creditor):
            if pid not in updated:
                raise UnknownParticipant(pid)
        updated[debt.debtor] = updated[debt.debtor] + debt.amount
        updated[debt.creditor] = updated[debt.creditor] - debt.amount
    return updated


def net_positions(debts: Iterable[Debt]) -> dict[str, Money]:
    """
    What each participant receives minus what it pays across `debts`.
    Participants appear in order of first mention.
    """
    positions: dict[str, Money] = {}
    for debt in debts:
        zero = Money.zero(debt.amount.currency)
        positions[debt.debtor] = positions.get(debt.debtor, zero) - debt.amount
        positions[debt.creditor] = positions.get(debt.creditor, zero) + debt.amount
    return positions
