"""
money.py — Money value object for the ledger

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   Integers in minor units (cents for USD, yen for JPY, fils for KWD).
   Never floating point internally.

2. TYPE SAFETY
   Operations between different currencies raise TypeError.
   Operations with bare int/float/Decimal raise TypeError (convert explicitly).

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.
   No side effects, safe to share between concurrent computations.

4. PER-CURRENCY PRECISION
   Each currency code has its own number of decimals (USD=2, JPY=0, KWD=3).
   Codes are plain ISO 4217 strings so that any rate table can be used.

5. EXPLICIT ROUNDING
   Rounding happens once, when a Decimal enters the Money domain
   (from_decimal). The caller chooses the strategy.

6. VERIFIABLE INVARIANTS
   distribute(n) and distribute_weighted(w) guarantee sum(parts) == original.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import (
    Decimal,
    InvalidOperation,
    ROUND_DOWN,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
)
from enum import Enum
from typing import ClassVar, Sequence, Union


Number = Union[Decimal, int, str, float]


# ==============================================================================
# CURRENCY PRECISION (ISO 4217 minor units)
# ==============================================================================

DEFAULT_DECIMALS = 2

# Only the exceptions to DEFAULT_DECIMALS are listed.
CURRENCY_DECIMALS: dict[str, int] = {
    "JPY": 0,   # Japanese Yen
    "KRW": 0,   # South Korean Won
    "VND": 0,   # Vietnamese Dong
    "CLP": 0,   # Chilean Peso
    "ISK": 0,   # Icelandic Krona
    "KWD": 3,   # Kuwaiti Dinar: 1 KWD = 1000 fils
    "BHD": 3,   # Bahraini Dinar
    "JOD": 3,   # Jordanian Dinar
    "OMR": 3,   # Omani Rial
    "TND": 3,   # Tunisian Dinar
}


def currency_decimals(code: str) -> int:
    """Number of decimals of the minor unit for a currency code."""
    return CURRENCY_DECIMALS.get(code, DEFAULT_DECIMALS)


def currency_multiplier(code: str) -> int:
    """Conversion factor major -> minor unit."""
    return 10 ** currency_decimals(code)


# ==============================================================================
# ROUNDING STRATEGIES
# ==============================================================================

class RoundingMode(Enum):
    """
    Rounding strategies.

    - HALF_UP: commercial rounding (0.5 -> 1)
    - HALF_EVEN: banker's rounding, minimizes statistical bias
    - DOWN: always towards zero (truncation)
    - UP: always away from zero
    - HALF_DOWN: 0.5 -> 0
    """
    HALF_UP = "half_up"
    HALF_EVEN = "half_even"
    DOWN = "down"
    UP = "up"
    HALF_DOWN = "half_down"


_DECIMAL_ROUNDING = {
    RoundingMode.HALF_UP: ROUND_HALF_UP,
    RoundingMode.HALF_EVEN: ROUND_HALF_EVEN,
    RoundingMode.DOWN: ROUND_DOWN,
    RoundingMode.UP: ROUND_UP,
    RoundingMode.HALF_DOWN: ROUND_HALF_DOWN,
}


def to_decimal(value: Number) -> Decimal:
    """
    Read a number as Decimal.

    Floats go through str() so that 0.85 means Decimal("0.85") and not the
    binary approximation 0.84999999999999997779...
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a valid amount")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}") from None
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise TypeError(f"Cannot read {type(value).__name__} as an amount")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def _apply_rounding(value: Decimal, mode: RoundingMode) -> int:
    """Apply the rounding strategy and return an integer."""
    rounding = _DECIMAL_ROUNDING.get(mode)
    if rounding is None:
        raise ValueError(f"Unknown rounding mode: {mode}")
    return int(value.quantize(Decimal(1), rounding=rounding))


def largest_remainder(units: int, weights: Sequence[Decimal]) -> list[int]:
    """
    Split `units` (>= 0) into integers proportional to `weights`.

    Each part gets floor(units * w / sum(w)); the leftover units go, one
    each, to the largest fractional remainders, lower index first on ties.

    INVARIANT: sum(result) == units
    """
    total_weight = sum(weights, Decimal(0))
    raw = [units * w / total_weight for w in weights]
    floors = [int(r.to_integral_value(rounding=ROUND_DOWN)) for r in raw]
    leftover = units - sum(floors)

    by_remainder = sorted(
        range(len(raw)),
        key=lambda i: (-(raw[i] - floors[i]), i),
    )
    for i in by_remainder[:leftover]:
        floors[i] += 1
    return floors


# ==============================================================================
# MONEY CLASS
# ==============================================================================

@dataclass(frozen=True, slots=True, order=False)
class Money:
    """
    Amount of money in one currency.

    INVARIANTS:
    1. _minor_units is always int (no floating point)
    2. _currency is a non-empty currency code
    3. Operations between different currencies raise TypeError
    4. distribute(n) and distribute_weighted(w) guarantee sum(parts) == self

    SERIALIZATION:
        {"minor_units": int, "currency": str}. Never serialized as float.
    """
    _minor_units: int
    _currency: str

    def __post_init__(self) -> None:
        if not isinstance(self._minor_units, int) or isinstance(self._minor_units, bool):
            raise TypeError(
                f"minor_units must be int, got {type(self._minor_units).__name__}"
            )
        if not isinstance(self._currency, str) or not self._currency:
            raise ValueError(f"Invalid currency code: {self._currency!r}")

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, major_units: int, currency: str) -> Money:
        """
        Build from whole major units (dollars, euros, ...).
        For fractional values use of_minor() or from_decimal().
        """
        return cls(major_units * currency_multiplier(currency), currency)

    @classmethod
    def of_minor(cls, minor_units: int, currency: str) -> Money:
        """Build from minor units (cents, ...). No conversion."""
        return cls(minor_units, currency)

    @classmethod
    def from_decimal(
        cls,
        value: Number,
        currency: str,
        rounding: RoundingMode = RoundingMode.HALF_EVEN,
    ) -> Money:
        """
        Build from a decimal amount in major units.

        Rounding to the currency's minor unit happens HERE, once.
        From this point on everything is integer.
        """
        minor = to_decimal(value) * currency_multiplier(currency)
        return cls(_apply_rounding(minor, rounding), currency)

    @classmethod
    def zero(cls, currency: str) -> Money:
        """Zero in a given currency. Useful as the start value of sum()."""
        return cls(0, currency)

    # -------------------------------------------------------------------------
    # Distribution
    # -------------------------------------------------------------------------

    MAX_DISTRIBUTION_PARTS: ClassVar[int] = 10_000

    def distribute(self, n: int) -> list[Money]:
        """
        Split the amount into n parts whose sum is EXACTLY self.

        The first `remainder` parts receive one extra minor unit; callers that
        need a different placement reorder the result.

        Raises:
            ValueError: if n <= 0 or n > MAX_DISTRIBUTION_PARTS
        """
        if n <= 0:
            raise ValueError(f"n must be > 0, got: {n}")
        if n > self.MAX_DISTRIBUTION_PARTS:
            raise ValueError(f"n exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}")

        base = self._minor_units // n
        remainder = self._minor_units % n

        return [
            Money.of_minor(base + (1 if i < remainder else 0), self._currency)
            for i in range(n)
        ]

    def distribute_weighted(self, weights: Sequence[Number]) -> list[Money]:
        """
        Split the amount proportionally to the given weights.

        ALGORITHM: largest remainder (Hare-Niemeyer).
        1. Each part gets floor(total * w / sum(w)) minor units
        2. The leftover units go, one each, to the parts with the largest
           fractional remainder; equal remainders go to the lower index

        INVARIANT: sum(result) == self
        """
        if not weights:
            raise ValueError("weights must not be empty")
        if len(weights) > self.MAX_DISTRIBUTION_PARTS:
            raise ValueError(f"weights exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}")

        exact_weights = [to_decimal(w) for w in weights]
        if any(w < 0 for w in exact_weights):
            raise ValueError("weights must not contain negative values")

        total_weight = sum(exact_weights, Decimal(0))
        if total_weight == 0:
            raise ValueError("sum of weights must not be 0")

        sign = -1 if self._minor_units < 0 else 1
        units = abs(self._minor_units)

        parts = largest_remainder(units, exact_weights)
        return [Money.of_minor(sign * p, self._currency) for p in parts]

    # -------------------------------------------------------------------------
    # Arithmetic (type-safe)
    # -------------------------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._check_same_currency(other, "+")
        return Money.of_minor(self._minor_units + other._minor_units, self._currency)

    def __sub__(self, other: Money) -> Money:
        self._check_same_currency(other, "-")
        return Money.of_minor(self._minor_units - other._minor_units, self._currency)

    def __neg__(self) -> Money:
        return Money.of_minor(-self._minor_units, self._currency)

    def __abs__(self) -> Money:
        return Money.of_minor(abs(self._minor_units), self._currency)

    def __mul__(self, factor: int) -> Money:
        """Multiplication by an integer quantity only."""
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(
                f"Money can only be multiplied by int, "
                f"not {type(factor).__name__}."
            )
        return Money.of_minor(self._minor_units * factor, self._currency)

    def __rmul__(self, factor: int) -> Money:
        return self.__mul__(factor)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return (
                self._minor_units == other._minor_units
                and self._currency == other._currency
            )
        return NotImplemented

    def __lt__(self, other: Money) -> bool:
        self._check_same_currency(other, "<")
        return self._minor_units < other._minor_units

    def __le__(self, other: Money) -> bool:
        self._check_same_currency(other, "<=")
        return self._minor_units <= other._minor_units

    def __gt__(self, other: Money) -> bool:
        self._check_same_currency(other, ">")
        return self._minor_units > other._minor_units

    def __ge__(self, other: Money) -> bool:
        self._check_same_currency(other, ">=")
        return self._minor_units >= other._minor_units

    def _check_same_currency(self, other: object, op: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(
                f"Operation not allowed: Money {op} {type(other).__name__}. "
                f"Use Money.of_minor() or Money.from_decimal() to convert."
            )
        if self._currency != other._currency:
            raise TypeError(
                f"Different currencies: {self._currency} {op} {other._currency}. "
                f"Convert explicitly first."
            )

    # -------------------------------------------------------------------------
    # Properties and output
    # -------------------------------------------------------------------------

    @property
    def minor_units(self) -> int:
        """Value in minor units (cents, ...)."""
        return self._minor_units

    @property
    def currency(self) -> str:
        """ISO 4217 currency code."""
        return self._currency

    @property
    def decimals(self) -> int:
        return currency_decimals(self._currency)

    @property
    def amount(self) -> Decimal:
        """Exact value in major units, as Decimal."""
        return Decimal(self._minor_units).scaleb(-self.decimals)

    def is_positive(self) -> bool:
        return self._minor_units > 0

    def is_negative(self) -> bool:
        return self._minor_units < 0

    def is_zero(self) -> bool:
        return self._minor_units == 0

    def __repr__(self) -> str:
        sign = "-" if self._minor_units < 0 else ""
        abs_minor = abs(self._minor_units)
        decimals = self.decimals

        if decimals == 0:
            return f"{sign}{abs_minor} {self._currency}"

        multiplier = 10 ** decimals
        major = abs_minor // multiplier
        minor = abs_minor % multiplier

        return f"{sign}{major}.{minor:0{decimals}d} {self._currency}"

    def __str__(self) -> str:
        return self.__repr__()

    def __hash__(self) -> int:
        return hash((self._minor_units, self._currency))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Serialize for persistence/API.

        Format: {"minor_units": int, "currency": str}
        """
        return {
            "minor_units": self._minor_units,
            "currency": self._currency,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Money:
        """Deserialize from {"minor_units": int, "currency": str}."""
        return cls.of_minor(int(data["minor_units"]), str(data["currency"]))


def money_sum(items: Sequence[Money], currency: str) -> Money:
    """Sum of Money values, zero in `currency` when empty."""
    total = Money.zero(currency)
    for item in items:
        total = total + item
    return total
