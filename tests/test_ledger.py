"""
test_ledger.py — Tests for balance accumulation

================================================================================
TEST STRUCTURE
================================================================================

1. UNIT TESTS
   Concrete trips with known balances, multi-currency, error cases.

2. PROPERTY-BASED TESTS (Hypothesis)
   Random expense histories:
   - balances of exact splits always sum to exactly zero
   - shares in the reference currency are debited exactly
   - the order of expenses never changes the result

================================================================================
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from travelsplit.config import LedgerConfig
from travelsplit.currency import DEFAULT_RATES, default_rate_table
from travelsplit.errors import ShareSumMismatch, UnknownCurrency, UnknownParticipant
from travelsplit.ledger import BalanceStatus, balance_status, compute_balances
from travelsplit.models import Expense, ExpenseShare
from travelsplit.money import Money, money_sum
from travelsplit.splitter import custom_expense, equal_expense


RATES = {"USD": 1.0, "EUR": 0.85}
PEOPLE = ["A", "B", "C"]


def minor(balances):
    return {pid: m.minor_units for pid, m in balances.items()}


# ==============================================================================
# TEST HELPERS
# ==============================================================================

@st.composite
def trip_strategy(draw, max_expenses=15):
    """Random participants and equal-split expenses in random currencies."""
    n = draw(st.integers(min_value=2, max_value=8))
    ids = [f"p{i}" for i in range(n)]
    expenses = []
    for i in range(draw(st.integers(min_value=0, max_value=max_expenses))):
        payer = draw(st.sampled_from(ids))
        currency = draw(st.sampled_from(sorted(DEFAULT_RATES)))
        amount = Money.of_minor(draw(st.integers(min_value=0, max_value=10**7)), currency)
        members = draw(st.lists(st.sampled_from(ids), min_size=1, unique=True))
        expenses.append(equal_expense(f"e{i}", payer, amount, members))
    return ids, expenses


# ==============================================================================
# UNIT TESTS
# ==============================================================================

class TestComputeBalances:

    def test_one_payer_equal_split(self):
        expense = equal_expense("e1", "A", Money.of(90, "USD"), PEOPLE)
        balances = compute_balances([expense], "USD", RATES, PEOPLE)

        assert balances == {
            "A": Money.of(60, "USD"),
            "B": Money.of(-30, "USD"),
            "C": Money.of(-30, "USD"),
        }

    def test_every_participant_appears(self):
        expense = equal_expense("e1", "A", Money.of(10, "USD"), ["A", "B"])
        balances = compute_balances([expense], "USD", RATES, ["A", "B", "idle"])

        assert balances["idle"] == Money.zero("USD")

    def test_no_expenses(self):
        balances = compute_balances([], "EUR", RATES, PEOPLE)
        assert balances == {pid: Money.zero("EUR") for pid in PEOPLE}

    def test_payer_outside_shares(self):
        expense = custom_expense("e1", "A", Money.of(60, "USD"), {"B": 30, "C": 30})
        balances = compute_balances([expense], "USD", RATES, PEOPLE)

        assert minor(balances) == {"A": 6000, "B": -3000, "C": -3000}

    def test_several_expenses_net_out(self):
        expenses = [
            equal_expense("e1", "A", Money.of(90, "USD"), PEOPLE),
            equal_expense("e2", "B", Money.of(30, "USD"), PEOPLE),
        ]
        balances = compute_balances(expenses, "USD", RATES, PEOPLE)

        assert minor(balances) == {"A": 5000, "B": -1000, "C": -4000}

    def test_expense_in_other_currency(self):
        expense = equal_expense("e1", "A", Money.of(100, "EUR"), ["A", "B"])
        balances = compute_balances([expense], "USD", RATES, ["A", "B"])

        # 100 EUR = 117.65 USD, split 58.83 / 58.82
        assert minor(balances) == {"A": 5882, "B": -5882}

    def test_reference_currency_other_than_table_anchor(self):
        expense = equal_expense("e1", "A", Money.of(117, "USD"), ["A", "B"])
        balances = compute_balances([expense], "EUR", RATES, ["A", "B"])

        # 117 USD = 99.45 EUR, debited 49.73 / 49.72
        assert minor(balances) == {"A": 4972, "B": -4972}

    def test_inputs_are_not_modified(self):
        expense = equal_expense("e1", "A", Money.of(90, "USD"), PEOPLE)
        expenses = [expense]
        people = list(PEOPLE)

        compute_balances(expenses, "USD", RATES, people)

        assert expenses == [expense]
        assert people == PEOPLE

    def test_accepts_generators(self):
        expenses = (equal_expense(f"e{i}", "A", Money.of(3, "USD"), PEOPLE) for i in range(3))
        balances = compute_balances(expenses, "USD", RATES, iter(PEOPLE))
        assert minor(balances) == {"A": 600, "B": -300, "C": -300}


class TestComputeBalancesErrors:

    def test_unknown_payer(self):
        expense = equal_expense("e1", "Z", Money.of(10, "USD"), ["A", "B"])

        with pytest.raises(UnknownParticipant) as exc_info:
            compute_balances([expense], "USD", RATES, PEOPLE)

        assert exc_info.value.participant_id == "Z"
        assert exc_info.value.expense_id == "e1"

    def test_unknown_share_participant(self):
        expense = equal_expense("e1", "A", Money.of(10, "USD"), ["A", "ghost"])

        with pytest.raises(UnknownParticipant) as exc_info:
            compute_balances([expense], "USD", RATES, PEOPLE)

        assert exc_info.value.participant_id == "ghost"

    def test_unknown_expense_currency(self):
        expense = equal_expense("e1", "A", Money.of(10, "XYZ"), PEOPLE)

        with pytest.raises(UnknownCurrency):
            compute_balances([expense], "USD", RATES, PEOPLE)

    def test_unknown_reference_currency(self):
        with pytest.raises(UnknownCurrency):
            compute_balances([], "XYZ", RATES, PEOPLE)

    def test_shares_not_matching_total(self):
        expense = Expense(
            "e1", "A", Money.of(100, "USD"),
            (ExpenseShare("B", Money.of(40, "USD"), Decimal(40)),),
        )

        with pytest.raises(ShareSumMismatch) as exc_info:
            compute_balances([expense], "USD", RATES, PEOPLE)

        assert exc_info.value.expense_id == "e1"

    def test_nonzero_expense_without_shares(self):
        expense = Expense("e1", "A", Money.of_minor(1, "USD"), ())

        with pytest.raises(ShareSumMismatch):
            compute_balances([expense], "USD", RATES, PEOPLE)

    def test_zero_expense_without_shares_is_ignored(self):
        expense = Expense("e1", "A", Money.zero("USD"), ())
        balances = compute_balances([expense], "USD", RATES, PEOPLE)
        assert all(b.is_zero() for b in balances.values())

    def test_gap_within_tolerance_stays_with_payer(self):
        # Shares 33.33 x 3 for a 100.00 total: accepted, each share debited as is.
        expense = custom_expense(
            "e1", "A", Money.of(100, "USD"),
            {"A": "33.33", "B": "33.33", "C": "33.33"},
        )
        balances = compute_balances([expense], "USD", RATES, PEOPLE)

        assert minor(balances) == {"A": 6667, "B": -3333, "C": -3333}
        assert money_sum(list(balances.values()), "USD") == Money.of_minor(1, "USD")

    def test_gap_within_tolerance_in_other_currency(self):
        # 100.00 EUR = 117.65 USD credited; 99.99 EUR = 117.64 USD debited
        expense = custom_expense(
            "e1", "A", Money.of(100, "EUR"),
            {"A": "33.33", "B": "33.33", "C": "33.33"},
        )
        balances = compute_balances([expense], "USD", RATES, PEOPLE)

        assert minor(balances) == {"A": 7843, "B": -3921, "C": -3921}


class TestBalanceStatus:

    def test_statuses(self):
        assert balance_status(Money.of_minor(500, "USD")) is BalanceStatus.RECEIVES
        assert balance_status(Money.of_minor(-2, "USD")) is BalanceStatus.OWES
        assert balance_status(Money.zero("USD")) is BalanceStatus.SETTLED

    def test_one_cent_counts_as_settled(self):
        assert balance_status(Money.of_minor(1, "USD")) is BalanceStatus.SETTLED
        assert balance_status(Money.of_minor(-1, "USD")) is BalanceStatus.SETTLED

    def test_status_labels(self):
        assert BalanceStatus.RECEIVES.value == "will receive"
        assert BalanceStatus.OWES.value == "owes others"
        assert BalanceStatus.SETTLED.value == "is settled up"

    def test_status_respects_tolerance(self):
        config = LedgerConfig(tolerance=Decimal("0.05"))
        assert balance_status(Money.of_minor(5, "USD"), config) is BalanceStatus.SETTLED
        assert balance_status(Money.of_minor(-6, "USD"), config) is BalanceStatus.OWES


# ==============================================================================
# PROPERTY-BASED TESTS
# ==============================================================================

class TestLedgerProperties:

    @given(trip=trip_strategy())
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_balances_are_conserved(self, trip):
        ids, expenses = trip
        balances = compute_balances(expenses, "USD", default_rate_table(), ids)

        assert set(balances) == set(ids)
        assert money_sum(list(balances.values()), "USD").is_zero()

    @given(trip=trip_strategy(), data=st.data())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_expense_order_does_not_matter(self, trip, data):
        ids, expenses = trip
        shuffled = data.draw(st.permutations(expenses))
        table = default_rate_table()

        assert compute_balances(expenses, "EUR", table, ids) == \
            compute_balances(shuffled, "EUR", table, ids)

    @given(data=st.data())
    @settings(max_examples=200)
    def test_same_currency_shares_are_debited_exactly(self, data):
        ids = ["p0", "p1", "p2", "p3"]
        expected = {pid: 0 for pid in ids}
        expenses = []
        for i in range(data.draw(st.integers(min_value=1, max_value=10))):
            payer = data.draw(st.sampled_from(ids))
            members = data.draw(st.lists(st.sampled_from(ids), min_size=1, unique=True))
            parts = [data.draw(st.integers(min_value=1, max_value=10**6)) for _ in members]
            gap = data.draw(st.sampled_from([-1, 0, 1]))
            total = Money.of_minor(sum(parts) + gap, "USD")
            shares = [(pid, Money.of_minor(p, "USD")) for pid, p in zip(members, parts)]
            expenses.append(custom_expense(f"e{i}", payer, total, shares))

            expected[payer] += total.minor_units
            for pid, p in zip(members, parts):
                expected[pid] -= p

        balances = compute_balances(expenses, "USD", RATES, ids)

        assert minor(balances) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
