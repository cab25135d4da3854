"""
models.py — Value objects supplied to the ledger by the trip store

Participants and expenses are owned by the caller. The ledger only reads
them for the duration of one computation, so every type here is frozen.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .money import Money


class ExpenseCategory(Enum):
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ACCOMMODATION = "Accommodation"
    ACTIVITIES = "Activities"
    SHOPPING = "Shopping"
    OTHER = "Other"


@dataclass(frozen=True)
class Participant:
    """
    Member of a trip. Only `id` matters to the ledger; the rest is carried
    for reports.
    """
    id: str
    name: str = ""
    email: Optional[str] = None
    claimed: bool = True  # bound to a real user account

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Participant id must not be empty")

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "claimed": self.claimed,
        }


@dataclass(frozen=True)
class ExpenseShare:
    """Portion of one expense attributed to one participant."""
    participant_id: str
    amount: Money
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "amount": self.amount.to_dict(),
            "percentage": str(self.percentage),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExpenseShare:
        return cls(
            participant_id=data["participant_id"],
            amount=Money.from_dict(data["amount"]),
            percentage=Decimal(str(data["percentage"])),
        )


@dataclass(frozen=True)
class Expense:
    """
    One payment made by `payer` on behalf of the participants in `shares`.

    INVARIANTS:
    - amount is not negative
    - every share is in the expense currency
    - the payer need not appear in shares (paying entirely for others)

    Whether the shares add up to the amount is checked by the ledger, which
    owns the tolerance (see travelsplit.config).
    """
    id: str
    payer: str
    amount: Money
    shares: tuple[ExpenseShare, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    title: str = ""
    category: ExpenseCategory = ExpenseCategory.OTHER

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Money):
            raise TypeError(f"Expense amount must be Money, got {type(self.amount).__name__}")
        if self.amount.is_negative():
            raise ValueError(f"Expense {self.id!r} has a negative amount: {self.amount}")
        object.__setattr__(self, "shares", tuple(self.shares))
        for share in self.shares:
            if share.amount.currency != self.amount.currency:
                raise TypeError(
                    f"Share of {share.participant_id!r} is in {share.amount.currency}, "
                    f"expense {self.id!r} is in {self.amount.currency}"
                )

    @property
    def currency(self) -> str:
        return self.amount.currency

    def participant_ids(self) -> list[str]:
        return [s.participant_id for s in self.shares]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for persistence/API. Amounts stay integer minor units."""
        return {
            "id": self.id,
            "payer": self.payer,
            "amount": self.amount.to_dict(),
            "shares": [s.to_dict() for s in self.shares],
            "timestamp": self.timestamp.isoformat(),
            "title": self.title,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Expense:
        timestamp = data.get("timestamp")
        return cls(
            id=data["id"],
            payer=data["payer"],
            amount=Money.from_dict(data["amount"]),
            shares=tuple(ExpenseShare.from_dict(s) for s in data.get("shares", [])),
            timestamp=(
                datetime.fromisoformat(timestamp) if timestamp
                else datetime.now(timezone.utc)
            ),
            title=data.get("title", ""),
            category=ExpenseCategory(data.get("category", ExpenseCategory.OTHER.value)),
        )
