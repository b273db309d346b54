# payledger/services/obligation_service.py

"""
SERVICE - OBLIGATION MANAGEMENT

Create, edit, delete and list obligations.
Settled obligations are immutable: edits and deletes are refused.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
import logging

from payledger.domain.exceptions import ObligationNotFoundError, SettledObligationError
from payledger.domain.models import (
    AnyObligation,
    LedgerSummary,
    ObligationStatus,
    OutstandingObligation,
)
from payledger.domain.services.allocation_engine import AllocationEngine
from payledger.infrastructure.db.repositories.obligation_repository import ObligationRepository

logger = logging.getLogger(__name__)


class ObligationService:
    def __init__(self, repository: ObligationRepository):
        self.repository = repository

    async def list(
        self,
        label: Optional[str] = None,
        occurred_on: Optional[date] = None,
        status: Optional[ObligationStatus] = None,
    ) -> List[AnyObligation]:
        return await self.repository.list(label=label, occurred_on=occurred_on, status=status)

    async def get(self, obligation_id: int) -> AnyObligation:
        obligation = await self.repository.get(obligation_id)
        if obligation is None:
            raise ObligationNotFoundError(obligation_id)
        return obligation

    async def create(self, label: str, occurred_on: date, amount: Decimal) -> OutstandingObligation:
        label = label.strip()
        if not label:
            raise ValueError("Obligation label cannot be empty")
        if amount <= Decimal("0"):
            raise ValueError("Obligation amount must be positive")

        obligation = await self.repository.create(
            label=label,
            occurred_on=occurred_on,
            amount=amount,
        )
        logger.info("Obligation created | id=%s | amount=%s", obligation.id, obligation.amount)
        return obligation

    async def update(
        self,
        obligation_id: int,
        label: str,
        occurred_on: date,
        amount: Decimal,
    ) -> OutstandingObligation:
        current = await self.get(obligation_id)
        if not isinstance(current, OutstandingObligation):
            raise SettledObligationError(obligation_id, "edit")

        # revise() re-validates label and amount
        revised = current.revise(label=label.strip(), occurred_on=occurred_on, amount=amount)
        updated = await self.repository.update(revised)
        if updated is None:
            # Settled between read and write
            raise SettledObligationError(obligation_id, "edit")

        logger.info("Obligation updated | id=%s", obligation_id)
        return updated

    async def delete(self, obligation_id: int) -> None:
        current = await self.get(obligation_id)
        if current.is_settled:
            raise SettledObligationError(obligation_id, "delete")

        if not await self.repository.delete_outstanding(obligation_id):
            raise SettledObligationError(obligation_id, "delete")

        logger.info("Obligation deleted | id=%s", obligation_id)

    async def summary(self) -> LedgerSummary:
        """Totals per status and the exact amounts currently payable"""
        totals = await self.repository.totals_by_status()
        outstanding = await self.repository.list_outstanding()

        outstanding_count, outstanding_total = totals[ObligationStatus.OUTSTANDING]
        settled_count, settled_total = totals[ObligationStatus.SETTLED]

        return LedgerSummary(
            outstanding_count=outstanding_count,
            outstanding_total=outstanding_total,
            settled_count=settled_count,
            settled_total=settled_total,
            payable_amounts=tuple(AllocationEngine.payable_amounts(outstanding)),
        )
