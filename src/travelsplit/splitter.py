"""
splitter.py — Split an expense total into per-participant shares

================================================================================
EQUAL SPLIT
================================================================================

    split_equal(Money.of_minor(10000, "USD"), ["carol", "alice", "bob"])

100.00 / 3 = 33.33 remainder 0.01. Remainder minor units go one each to the
participants with the smallest ids, so the result does not depend on the order
in which the caller lists them:

    carol 33.33, alice 33.34, bob 33.33

================================================================================
CUSTOM SPLIT
================================================================================

The caller supplies every amount. The splitter only validates: the amounts
must add up to the total within the configured tolerance, otherwise
ShareSumMismatch is raised. Nothing is scaled or corrected.

================================================================================
"""

from __future__ import annotations
import logging
from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from .config import DEFAULT_CONFIG, LedgerConfig
from .errors import ShareSumMismatch, ZeroParticipants
from .models import Expense, ExpenseCategory, ExpenseShare
from .money import Money, Number, largest_remainder, money_sum

logger = logging.getLogger(__name__)

ShareInput = Union[Money, Number]
CustomShares = Union[Mapping[str, ShareInput], Sequence[Tuple[str, ShareInput]]]

# Percentages carry 4 decimals: 100% is 1_000_000 units of 0.0001.
_PERCENT_PLACES = 4
_PERCENT_UNITS = 100 * 10 ** _PERCENT_PLACES


def _check_participants(participant_ids: Sequence[str], config: LedgerConfig) -> None:
    if not participant_ids:
        raise ZeroParticipants()
    if len(set(participant_ids)) != len(participant_ids):
        duplicates = sorted(p for p, n in Counter(participant_ids).items() if n > 1)
        raise ValueError(f"Duplicate participants in split: {duplicates}")
    if len(participant_ids) > config.max_participants:
        raise ValueError(
            f"Split over {len(participant_ids)} participants exceeds "
            f"the limit of {config.max_participants}"
        )


def _percentages(amounts: Sequence[Money]) -> list[Decimal]:
    """
    Percentages of `amounts`, 4 decimals each, summing to exactly 100.
    All-zero amounts get an even split.
    """
    weights = [Decimal(a.minor_units) for a in amounts]
    if not any(weights):
        weights = [Decimal(1)] * len(amounts)
    return [
        Decimal(units).scaleb(-_PERCENT_PLACES)
        for units in largest_remainder(_PERCENT_UNITS, weights)
    ]


# ==============================================================================
# SPLITS
# ==============================================================================

def split_equal(
    total: Money,
    participant_ids: Iterable[str],
    config: Optional[LedgerConfig] = None,
) -> list[ExpenseShare]:
    """
    Split `total` equally among `participant_ids`.

    Shares are returned in the caller's order. Leftover minor units are
    assigned in ascending id order.

    Raises:
        ZeroParticipants: if participant_ids is empty
        ValueError: negative total, duplicate ids, too many participants
    """
    config = config or DEFAULT_CONFIG
    ids = list(participant_ids)
    _check_participants(ids, config)
    if total.is_negative():
        raise ValueError(f"Cannot split a negative total: {total}")

    # distribute() puts the extra units first; hand them out by id rank.
    parts = total.distribute(len(ids))
    rank = {pid: i for i, pid in enumerate(sorted(ids))}
    percentages = _percentages(parts)

    shares = [
        ExpenseShare(pid, parts[rank[pid]], percentages[rank[pid]]) for pid in ids
    ]
    logger.debug("Split %s equally among %d participants", total, len(ids))
    return shares


def split_custom(
    total: Money,
    shares: CustomShares,
    config: Optional[LedgerConfig] = None,
) -> list[ExpenseShare]:
    """
    Validate explicit per-participant amounts against `total`.

    `shares` maps participant id -> amount, either as a mapping or as
    (id, amount) pairs. Amounts are Money in the total's currency or plain
    numbers, which are rounded once to the currency's minor unit.

    Raises:
        ZeroParticipants: if no share is given
        ShareSumMismatch: if the amounts differ from total by more than the
            configured tolerance
        TypeError: a Money amount in another currency
        ValueError: negative amounts or totals, duplicate ids
    """
    config = config or DEFAULT_CONFIG
    items = list(shares.items()) if isinstance(shares, Mapping) else list(shares)
    _check_participants([pid for pid, _ in items], config)
    if total.is_negative():
        raise ValueError(f"Cannot split a negative total: {total}")

    amounts: list[Tuple[str, Money]] = []
    for pid, value in items:
        if isinstance(value, Money):
            if value.currency != total.currency:
                raise TypeError(
                    f"Share of {pid!r} is in {value.currency}, total is in {total.currency}"
                )
            amount = value
        else:
            amount = Money.from_decimal(value, total.currency, config.rounding)
        if amount.is_negative():
            raise ValueError(f"Share of {pid!r} is negative: {amount}")
        amounts.append((pid, amount))

    actual = money_sum([a for _, a in amounts], total.currency)
    difference = abs(actual - total)
    if difference.minor_units > config.tolerance_units(total.currency):
        raise ShareSumMismatch(expected=total, actual=actual)

    percentages = _percentages([a for _, a in amounts])
    return [
        ExpenseShare(pid, amount, percentage)
        for (pid, amount), percentage in zip(amounts, percentages)
    ]


# ==============================================================================
# EXPENSE BUILDERS
# ==============================================================================

def equal_expense(
    expense_id: str,
    payer: str,
    total: Money,
    participant_ids: Iterable[str],
    timestamp: Optional[datetime] = None,
    title: str = "",
    category: ExpenseCategory = ExpenseCategory.OTHER,
    config: Optional[LedgerConfig] = None,
) -> Expense:
    """Expense paid by `payer` and split equally among `participant_ids`."""
    shares = split_equal(total, participant_ids, config)
    return _build_expense(expense_id, payer, total, shares, timestamp, title, category)


def custom_expense(
    expense_id: str,
    payer: str,
    total: Money,
    shares: CustomShares,
    timestamp: Optional[datetime] = None,
    title: str = "",
    category: ExpenseCategory = ExpenseCategory.OTHER,
    config: Optional[LedgerConfig] = None,
) -> Expense:
    """Expense paid by `payer` with explicit per-participant amounts."""
    validated = split_custom(total, shares, config)
    return _build_expense(expense_id, payer, total, validated, timestamp, title, category)


def _build_expense(
    expense_id: str,
    payer: str,
    total: Money,
    shares: list[ExpenseShare],
    timestamp: Optional[datetime],
    title: str,
    category: ExpenseCategory,
) -> Expense:
    if timestamp is None:
        return Expense(expense_id, payer, total, tuple(shares), title=title, category=category)
    return Expense(
        expense_id, payer, total, tuple(shares),
        timestamp=timestamp, title=title, category=category,
    )
