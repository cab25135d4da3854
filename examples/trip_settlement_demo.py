#!/usr/bin/env python3
"""
trip_settlement_demo.py — Settling a three-currency weekend trip

================================================================================
THE PROBLEM
================================================================================

Ana, Ben and Cy spend a weekend between Lisbon and London. Ana books the
hotel in euros, Ben pays dinner in pounds, Cy pays the taxi in dollars and
only for the other two. Who pays whom, and how much, so that everybody is
even?

================================================================================
THE APPROACH
================================================================================

1. Every expense is split in its own currency (integer minor units).
2. The ledger converts each expense once into the trip currency and
   folds it into net balances that always sum to exactly zero.
3. The simplifier turns the balances into a short list of transfers.

Run with the package installed (pip install -e .):

    python examples/trip_settlement_demo.py

================================================================================
"""

import logging

from travelsplit import (
    BalanceStatus,
    ExpenseCategory,
    Money,
    Participant,
    Trip,
    apply_debts,
    average_per_person,
    balance_status,
    currency_symbol,
    custom_expense,
    default_rate_table,
    equal_expense,
    settle_trip,
    total_cost,
)


def build_trip() -> Trip:
    people = (
        Participant("ana", "Ana"),
        Participant("ben", "Ben"),
        Participant("cy", "Cy", claimed=False),
    )
    everyone = [p.id for p in people]
    expenses = [
        equal_expense(
            "hotel", "ana", Money.of(420, "EUR"), everyone,
            title="Hotel, 2 nights", category=ExpenseCategory.ACCOMMODATION,
        ),
        equal_expense(
            "dinner", "ben", Money.from_decimal("95.50", "GBP"), everyone,
            title="Dinner", category=ExpenseCategory.FOOD,
        ),
        custom_expense(
            "taxi", "cy", Money.of(40, "USD"), {"ana": 25, "ben": 15},
            title="Taxi to the airport", category=ExpenseCategory.TRANSPORTATION,
        ),
    ]
    return Trip("weekend", "Lisbon & London", people, expenses, base_currency="EUR")


def show_expenses(trip: Trip):
    print("=" * 60)
    print("EXPENSES")
    print("=" * 60)
    print()
    for expense in trip.expenses:
        payer = trip.participant(expense.payer).display_name
        print(f"  {expense.title:<22} {expense.amount!s:>14}  paid by {payer}")
        for share in expense.shares:
            name = trip.participant(share.participant_id).display_name
            print(f"      {name:<6} {share.amount!s:>12}  ({share.percentage}%)")
    print()


def show_settlement(trip: Trip):
    rates = default_rate_table()
    settlement = settle_trip(trip, rates)
    symbol = currency_symbol(settlement.currency)

    print("=" * 60)
    print(f"BALANCES ({settlement.currency})")
    print("=" * 60)
    print()
    for pid, status in settlement.statuses().items():
        name = trip.participant(pid).display_name
        print(f"  {name:<6} {status.value:<14} {settlement.balances[pid]!s:>14}")
    print()

    print("=" * 60)
    print("TRANSFERS")
    print("=" * 60)
    print()
    for debt in settlement.debts:
        debtor = trip.participant(debt.debtor).display_name
        creditor = trip.participant(debt.creditor).display_name
        print(f"  {debtor} pays {creditor} {symbol}{debt.amount.amount}")
    print()

    after = apply_debts(settlement.balances, settlement.debts)
    even = all(balance_status(b) is BalanceStatus.SETTLED for b in after.values())
    print(f"Everybody even afterwards? {even}")
    print(f"Trip total:     {total_cost(trip, rates)}")
    print(f"Per person:     {average_per_person(trip, rates)}")
    print()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    trip = build_trip()
    show_expenses(trip)
    show_settlement(trip)


if __name__ == "__main__":
    main()
