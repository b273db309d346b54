"""
ALLOCATION ENGINE
Decide which outstanding obligations a payment settles

RESPONSIBILITIES:
- Walk outstanding obligations oldest first
- Find the longest prefix whose cumulative sum fits the payment
- Settle that prefix only when it matches the payment exactly
- NO PERSISTENCE, NO SIDE EFFECTS

RULES:
❌ No partial settlement of a single obligation
❌ No leftover money retained alongside a settlement
✅ Deterministic output
✅ Never raises; always returns a complete outcome
"""

from decimal import Decimal
from typing import List, Sequence, Tuple

from payledger.domain.models import AllocationOutcome, OutstandingObligation


class AllocationEngine:
    """
    Allocation Engine
    Applies a payment to an ordered sequence of outstanding obligations
    """

    def allocate(
        self,
        outstanding: Sequence[OutstandingObligation],
        amount: Decimal
    ) -> AllocationOutcome:
        """
        Allocate a payment against outstanding obligations

        Args:
            outstanding: Obligations ordered by date ascending (ties by id)
            amount: Positive payment amount, validated by the caller

        Returns:
            AllocationOutcome; ``settled`` holds the obligations to settle
        """
        if not outstanding:
            return AllocationOutcome(
                requested_amount=amount,
                remaining_amount=amount,
            )

        prefix, total = self._payable_prefix(outstanding, amount)

        # Payment does not cover even the oldest obligation
        if not prefix:
            return AllocationOutcome(
                requested_amount=amount,
                remaining_amount=amount,
                required_amount=outstanding[0].amount,
            )

        # Leftover money would remain next to a settlement
        if amount > total:
            return AllocationOutcome(
                requested_amount=amount,
                remaining_amount=amount,
                required_amount=total,
            )

        return AllocationOutcome(
            requested_amount=amount,
            remaining_amount=amount - total,
            settled=prefix,
        )

    @staticmethod
    def _payable_prefix(
        outstanding: Sequence[OutstandingObligation],
        amount: Decimal
    ) -> Tuple[Tuple[OutstandingObligation, ...], Decimal]:
        """
        Longest prefix whose cumulative sum is <= amount

        Returns:
            Tuple of (prefix obligations, prefix total)
        """
        total = Decimal('0')
        taken = 0

        for obligation in outstanding:
            candidate = total + obligation.amount
            if candidate > amount:
                break
            total = candidate
            taken += 1

        return tuple(outstanding[:taken]), total

    @staticmethod
    def payable_amounts(outstanding: Sequence[OutstandingObligation]) -> List[Decimal]:
        """
        Every payment amount the engine would accept right now

        One entry per outstanding obligation: the cumulative sum of the
        first k obligations, k = 1..n.
        """
        amounts = []
        running = Decimal('0')
        for obligation in outstanding:
            running += obligation.amount
            amounts.append(running)
        return amounts
