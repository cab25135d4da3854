"""
currency.py — Currency conversion against a reference-anchored rate table

================================================================================
RATE TABLE
================================================================================

A RateTable maps currency code -> rate relative to ONE reference currency:

    {"USD": 1.0, "EUR": 0.85, "JPY": 110}     # 1 USD = 0.85 EUR = 110 JPY

Conversion goes through the reference currency:

    converted = amount / rate[from] * rate[to]

The table is always passed in by the caller. Nothing in this module fetches
rates; DEFAULT_RATES is a static table for tests, demos and offline use.

================================================================================
UNKNOWN CURRENCIES
================================================================================

A code missing from the table raises UnknownCurrency, on either side of the
conversion and also when both codes are equal.

================================================================================
"""

from __future__ import annotations
from decimal import Decimal
from types import MappingProxyType
from collections.abc import Iterator, Mapping

from .errors import UnknownCurrency
from .money import Money, Number, RoundingMode, to_decimal


# ==============================================================================
# STATIC DATA
# ==============================================================================

# Static USD-anchored rates.
DEFAULT_RATES: Mapping[str, float] = MappingProxyType({
    "USD": 1.0,      # US Dollar (reference)
    "EUR": 0.85,     # Euro
    "GBP": 0.73,     # British Pound
    "JPY": 110.0,    # Japanese Yen
    "CAD": 1.25,     # Canadian Dollar
    "AUD": 1.35,     # Australian Dollar
    "INR": 74.0,     # Indian Rupee
    "RUB": 73.0,     # Russian Ruble
    "KRW": 1150.0,   # South Korean Won
    "HKD": 7.8,      # Hong Kong Dollar
    "PHP": 50.0,     # Philippine Peso
    "TRY": 8.5,      # Turkish Lira
    "UAH": 27.0,     # Ukrainian Hryvnia
    "NGN": 410.0,    # Nigerian Naira
    "ZAR": 14.5,     # South African Rand
})

CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType({
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "INR": "₹",
    "RUB": "₽",
    "KRW": "₩",
    "HKD": "HK$",
    "PHP": "₱",
    "TRY": "₺",
    "UAH": "₴",
    "NGN": "₦",
    "ZAR": "R",
})


def currency_symbol(code: str) -> str:
    """Display symbol for a code; the code itself when none is known."""
    return CURRENCY_SYMBOLS.get(code, code)


# ==============================================================================
# RATE TABLE
# ==============================================================================

class RateTable(Mapping[str, Decimal]):
    """
    Immutable code -> Decimal rate mapping anchored to a reference currency.

    INVARIANTS:
    - the reference currency is present with rate exactly 1
    - every rate is a finite, strictly positive Decimal
    """

    def __init__(self, rates: Mapping[str, Number], reference: str = "USD"):
        parsed: dict[str, Decimal] = {}
        for code, rate in rates.items():
            value = to_decimal(rate)
            if value <= 0:
                raise ValueError(f"Rate for {code} must be > 0, got {rate!r}")
            parsed[code] = value

        if reference not in parsed:
            raise ValueError(f"Reference currency {reference} missing from rate table")
        if parsed[reference] != 1:
            raise ValueError(
                f"Reference currency {reference} must have rate 1, "
                f"got {parsed[reference]}"
            )

        self._rates = MappingProxyType(parsed)
        self._reference = reference

    @property
    def reference(self) -> str:
        return self._reference

    def codes(self) -> list[str]:
        """All currency codes, sorted."""
        return sorted(self._rates)

    def symbols(self) -> list[tuple[str, str]]:
        """(symbol, code) pairs sorted by code, for currency pickers."""
        return [(currency_symbol(code), code) for code in self.codes()]

    def __getitem__(self, code: str) -> Decimal:
        return self._rates[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"RateTable(reference={self._reference}, currencies={len(self._rates)})"


def default_rate_table() -> RateTable:
    """The static USD-anchored table."""
    return RateTable(DEFAULT_RATES, reference="USD")


# ==============================================================================
# CONVERSION
# ==============================================================================

def lookup_rate(rate_table: Mapping[str, Number], code: str) -> Decimal:
    """Rate of `code` in `rate_table`; UnknownCurrency when it is missing."""
    try:
        rate = rate_table[code]
    except KeyError:
        raise UnknownCurrency(code, sorted(rate_table)) from None
    value = to_decimal(rate)
    if value <= 0:
        raise ValueError(f"Rate for {code} must be > 0, got {rate!r}")
    return value


def convert(
    amount: Number,
    from_currency: str,
    to_currency: str,
    rate_table: Mapping[str, Number],
) -> Decimal:
    """
    Convert `amount` between two currencies of `rate_table`.

    `rate_table` is a RateTable or any mapping code -> rate anchored to one
    reference currency.

    The result is an exact, unrounded Decimal; rounding to minor units is the
    caller's decision (see convert_money).

    Raises:
        UnknownCurrency: if either code is missing from the table
    """
    from_rate = lookup_rate(rate_table, from_currency)
    to_rate = lookup_rate(rate_table, to_currency)

    value = to_decimal(amount)
    if from_currency == to_currency:
        return value
    return value / from_rate * to_rate


def convert_money(
    money: Money,
    to_currency: str,
    rate_table: Mapping[str, Number],
    rounding: RoundingMode = RoundingMode.HALF_EVEN,
) -> Money:
    """Convert a Money value, rounding once to the target's minor units."""
    if money.currency == to_currency:
        # Still validates the code.
        lookup_rate(rate_table, to_currency)
        return money
    converted = convert(money.amount, money.currency, to_currency, rate_table)
    return Money.from_decimal(converted, to_currency, rounding)

