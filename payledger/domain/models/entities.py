"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union


class ObligationStatus(str, Enum):
    """Obligation lifecycle state (one-way: OUTSTANDING -> SETTLED)"""
    OUTSTANDING = "OUTSTANDING"
    SETTLED = "SETTLED"


class OutcomeCategory(str, Enum):
    """User-facing category of an allocation outcome"""
    NOTHING_TO_PAY = "NOTHING_TO_PAY"
    SETTLED = "SETTLED"
    REJECTED_EXCESS = "REJECTED_EXCESS"
    REJECTED_INSUFFICIENT = "REJECTED_INSUFFICIENT"


@dataclass(frozen=True)
class Obligation:
    """Monetary obligation - Immutable"""
    id: int
    label: str
    occurred_on: date
    amount: Decimal

    status: ClassVar[ObligationStatus]

    def __post_init__(self):
        if not self.label or not self.label.strip():
            raise ValueError("Obligation label cannot be empty")
        if self.amount <= Decimal('0'):
            raise ValueError("Obligation amount must be positive")

    @property
    def is_settled(self) -> bool:
        return self.status == ObligationStatus.SETTLED


@dataclass(frozen=True)
class OutstandingObligation(Obligation):
    """Obligation still waiting for payment"""

    status: ClassVar[ObligationStatus] = ObligationStatus.OUTSTANDING

    def settle(self) -> "SettledObligation":
        """The only way to obtain a SettledObligation"""
        return SettledObligation(
            id=self.id,
            label=self.label,
            occurred_on=self.occurred_on,
            amount=self.amount,
        )

    def revise(
        self,
        label: str,
        occurred_on: date,
        amount: Decimal
    ) -> "OutstandingObligation":
        return replace(self, label=label, occurred_on=occurred_on, amount=amount)


@dataclass(frozen=True)
class SettledObligation(Obligation):
    """Paid obligation; no further transitions"""

    status: ClassVar[ObligationStatus] = ObligationStatus.SETTLED


AnyObligation = Union[OutstandingObligation, SettledObligation]


@dataclass(frozen=True)
class AllocationOutcome:
    """Result of applying one payment to the outstanding set - Immutable"""
    requested_amount: Decimal
    remaining_amount: Decimal
    required_amount: Optional[Decimal] = None
    settled: Tuple[OutstandingObligation, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.remaining_amount < Decimal('0'):
            raise ValueError("Remaining amount cannot be negative")

    @property
    def settled_count(self) -> int:
        return len(self.settled)

    @property
    def settled_ids(self) -> Tuple[int, ...]:
        return tuple(o.id for o in self.settled)

    @property
    def settled_total(self) -> Decimal:
        return self.requested_amount - self.remaining_amount


@dataclass(frozen=True)
class LedgerSummary:
    """Counts and totals per status"""
    outstanding_count: int
    outstanding_total: Decimal
    settled_count: int
    settled_total: Decimal
    payable_amounts: Tuple[Decimal, ...]
