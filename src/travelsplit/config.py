"""
config.py — Ledger configuration

One LedgerConfig value is threaded through every computation as `config=`.
The reference currency lives here and nowhere else.

    from travelsplit.config import LedgerConfig

    config = LedgerConfig.from_env()          # reads .env and TRAVELSPLIT_*
    config = LedgerConfig(reference_currency="EUR")
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional

from dotenv import load_dotenv

from .money import RoundingMode, currency_multiplier, to_decimal


ENV_PREFIX = "TRAVELSPLIT_"


@dataclass(frozen=True)
class LedgerConfig:
    """
    Settings shared by the splitter, the ledger and the simplifier.

    - reference_currency: currency of balances and debts
    - tolerance: amount (major units) up to which a difference is ignored;
      used for share-sum validation and as the settlement epsilon
    - rounding: strategy used whenever a Decimal becomes Money
    - max_participants: upper bound for a single split
    """
    reference_currency: str = "USD"
    tolerance: Decimal = field(default_factory=lambda: Decimal("0.01"))
    rounding: RoundingMode = RoundingMode.HALF_EVEN
    max_participants: int = 10_000

    def __post_init__(self) -> None:
        if not self.reference_currency:
            raise ValueError("reference_currency must not be empty")
        if not isinstance(self.tolerance, Decimal):
            object.__setattr__(self, "tolerance", to_decimal(self.tolerance))
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.max_participants <= 0:
            raise ValueError(
                f"max_participants must be > 0, got {self.max_participants}"
            )

    def tolerance_units(self, currency: str) -> int:
        """
        Tolerance in minor units of `currency` (0.01 USD -> 1). Differences
        and residues up to and including this many units are ignored.
        """
        return int(self.tolerance * currency_multiplier(currency))

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> LedgerConfig:
        """
        Build a config from TRAVELSPLIT_* environment variables.

        A .env file is loaded first (variables already set in the environment
        win). Unset variables keep their defaults.
        """
        load_dotenv(dotenv_path=dotenv_path)
        defaults = cls()

        tolerance = defaults.tolerance
        raw_tolerance = os.environ.get(ENV_PREFIX + "TOLERANCE")
        if raw_tolerance:
            try:
                tolerance = Decimal(raw_tolerance)
            except InvalidOperation:
                raise ValueError(
                    f"{ENV_PREFIX}TOLERANCE is not a number: {raw_tolerance!r}"
                ) from None

        rounding = defaults.rounding
        raw_rounding = os.environ.get(ENV_PREFIX + "ROUNDING")
        if raw_rounding:
            try:
                rounding = RoundingMode(raw_rounding.lower())
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX}ROUNDING must be one of "
                    f"{[m.value for m in RoundingMode]}, got {raw_rounding!r}"
                ) from None

        return cls(
            reference_currency=os.environ.get(
                ENV_PREFIX + "REFERENCE_CURRENCY", defaults.reference_currency
            ).upper(),
            tolerance=tolerance,
            rounding=rounding,
            max_participants=int(
                os.environ.get(ENV_PREFIX + "MAX_PARTICIPANTS", defaults.max_participants)
            ),
        )


DEFAULT_CONFIG = LedgerConfig()
