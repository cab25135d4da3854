"""
ledger.py — Fold an expense history into net balances

================================================================================
ACCOUNTING RULES
================================================================================

For every expense, in the reference currency:

    balances[payer]             += converted total
    balances[share.participant] -= converted share

Positive balance: the participant should receive money.
Negative balance: the participant owes money.

Totals and shares are converted with one rounding each. The sum of the
shares is converted once and distributed back over the shares in proportion
to their original amounts (largest remainder), so:

    - a share already in the reference currency is debited exactly
    - a share in another currency is debited its own conversion, up to
      rounding
    - when the shares add up to the expense amount, debits add up to the
      credit and sum(balances.values()) == 0 exactly

Shares that miss the amount by no more than the tolerance are accepted;
the gap stays on the payer's balance.

================================================================================
ORDER INDEPENDENCE
================================================================================

Each expense is converted on its own and balances are integer minor units,
so any permutation of the expense list produces identical balances.

================================================================================
"""

from __future__ import annotations
import logging
from enum import Enum
from functools import partial, reduce
from typing import Iterable, Mapping, Optional

from .config import DEFAULT_CONFIG, LedgerConfig
from .currency import convert_money, lookup_rate
from .errors import ShareSumMismatch, UnknownParticipant
from .models import Expense
from .money import Money, Number, money_sum

logger = logging.getLogger(__name__)


class BalanceStatus(Enum):
    RECEIVES = "will receive"
    OWES = "owes others"
    SETTLED = "is settled up"


def compute_balances(
    expenses: Iterable[Expense],
    reference_currency: str,
    rate_table: Mapping[str, Number],
    participant_ids: Iterable[str],
    config: Optional[LedgerConfig] = None,
) -> dict[str, Money]:
    """
    Net balance of every participant, in `reference_currency`.

    Every id in `participant_ids` appears in the result, with zero when it
    took part in no expense.

    Raises:
        UnknownParticipant: payer or share participant not in participant_ids
        UnknownCurrency: expense or reference currency not in rate_table
        ShareSumMismatch: shares of an expense do not add up to its amount
    """
    config = config or DEFAULT_CONFIG
    lookup_rate(rate_table, reference_currency)

    ids = list(participant_ids)
    initial = {pid: Money.zero(reference_currency) for pid in ids}
    step = partial(
        _post_expense,
        known=frozenset(ids),
        reference_currency=reference_currency,
        rate_table=rate_table,
        config=config,
    )

    expense_list = list(expenses)
    balances = reduce(step, expense_list, initial)
    logger.debug(
        "Computed %d balances in %s from %d expenses",
        len(balances), reference_currency, len(expense_list),
    )
    return balances


def _post_expense(
    balances: dict[str, Money],
    expense: Expense,
    *,
    known: frozenset[str],
    reference_currency: str,
    rate_table: Mapping[str, Number],
    config: LedgerConfig,
) -> dict[str, Money]:
    """One fold step: a new balance map with `expense` applied."""
    if expense.payer not in known:
        raise UnknownParticipant(expense.payer, expense.id)
    for share in expense.shares:
        if share.participant_id not in known:
            raise UnknownParticipant(share.participant_id, expense.id)

    shares_total = money_sum([s.amount for s in expense.shares], expense.currency)
    gap = abs(shares_total - expense.amount)
    if gap.minor_units > config.tolerance_units(expense.currency):
        raise ShareSumMismatch(expense.amount, shares_total, expense.id)
    if not gap.is_zero():
        logger.warning(
            "Expense %r shares sum to %s for a total of %s",
            expense.id, shares_total, expense.amount,
        )

    credit = convert_money(expense.amount, reference_currency, rate_table, config.rounding)
    if shares_total.is_zero():
        if not credit.is_zero():
            raise ShareSumMismatch(expense.amount, shares_total, expense.id)
        return balances

    debit_total = convert_money(shares_total, reference_currency, rate_table, config.rounding)
    debits = debit_total.distribute_weighted([s.amount.minor_units for s in expense.shares])

    updated = dict(balances)
    updated[expense.payer] = updated[expense.payer] + credit
    for share, debit in zip(expense.shares, debits):
        updated[share.participant_id] = updated[share.participant_id] - debit
    return updated


def balance_status(balance: Money, config: Optional[LedgerConfig] = None) -> BalanceStatus:
    """Whether a participant receives, owes, or is settled, within tolerance."""
    config = config or DEFAULT_CONFIG
    threshold = config.tolerance_units(balance.currency)
    if balance.minor_units > threshold:
        return BalanceStatus.RECEIVES
    if balance.minor_units < -threshold:
        return BalanceStatus.OWES
    return BalanceStatus.SETTLED
