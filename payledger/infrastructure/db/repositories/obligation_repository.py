"""
Obligation Repository
CRUD, filtered listing and settlement persistence for obligations
"""

from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from payledger.domain.models import (
    AnyObligation,
    ObligationStatus,
    OutstandingObligation,
    SettledObligation,
)
from payledger.infrastructure.db.models import ObligationModel


class ObligationRepository:
    """Repository for Obligation data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["ObligationRepository"]:
        """
        Explicit unit of work: commit on success, roll back on any error
        """
        try:
            yield self
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def create(
        self,
        label: str,
        occurred_on: date,
        amount: Decimal
    ) -> OutstandingObligation:
        """
        Create a new obligation (always OUTSTANDING)

        Args:
            label: Description
            occurred_on: Date the obligation occurred
            amount: Positive amount

        Returns:
            Created OutstandingObligation
        """
        model = ObligationModel(
            label=label,
            occurred_on=occurred_on,
            amount=amount,
            status=ObligationStatus.OUTSTANDING
        )

        self.session.add(model)
        await self.session.flush()

        return self._to_domain(model)

    async def get(self, obligation_id: int) -> Optional[AnyObligation]:
        model = await self.session.get(ObligationModel, obligation_id)
        return self._to_domain(model) if model else None

    async def list(
        self,
        label: Optional[str] = None,
        occurred_on: Optional[date] = None,
        status: Optional[ObligationStatus] = None
    ) -> List[AnyObligation]:
        """
        List obligations matching all given filters

        Args:
            label: Case-insensitive substring of the label
            occurred_on: Exact date
            status: Exact status

        Returns:
            Obligations ordered by date, then id
        """
        stmt = select(ObligationModel)

        if label:
            stmt = stmt.where(
                func.lower(ObligationModel.label).contains(label.lower(), autoescape=True)
            )
        if occurred_on is not None:
            stmt = stmt.where(ObligationModel.occurred_on == occurred_on)
        if status is not None:
            stmt = stmt.where(ObligationModel.status == status)

        result = await self.session.execute(
            stmt.order_by(ObligationModel.occurred_on.asc(), ObligationModel.id.asc())
        )
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_outstanding(self, lock: bool = False) -> List[OutstandingObligation]:
        """
        Outstanding obligations in payment order (oldest first, ties by id)

        Args:
            lock: Take row locks (FOR UPDATE) where the backend supports it
        """
        stmt = (
            select(ObligationModel)
            .where(ObligationModel.status == ObligationStatus.OUTSTANDING)
            .order_by(ObligationModel.occurred_on.asc(), ObligationModel.id.asc())
        )
        if lock:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def update(self, obligation: OutstandingObligation) -> Optional[OutstandingObligation]:
        """
        Persist edits to an outstanding obligation

        Returns:
            Updated obligation, or None if it is missing or no longer outstanding
        """
        model = await self.session.get(ObligationModel, obligation.id)
        if model is None or model.status != ObligationStatus.OUTSTANDING:
            return None

        model.label = obligation.label
        model.occurred_on = obligation.occurred_on
        model.amount = obligation.amount
        await self.session.flush()

        return self._to_domain(model)

    async def delete_outstanding(self, obligation_id: int) -> bool:
        model = await self.session.get(ObligationModel, obligation_id)
        if model is None or model.status != ObligationStatus.OUTSTANDING:
            return False

        await self.session.delete(model)
        await self.session.flush()
        return True

    async def mark_settled(self, settled: Sequence[SettledObligation]) -> int:
        """
        Persist settlement transitions

        Only rows still OUTSTANDING are transitioned.

        Returns:
            Number of obligations actually settled
        """
        ids = [obligation.id for obligation in settled]
        if not ids:
            return 0

        result = await self.session.execute(
            select(ObligationModel)
            .where(ObligationModel.id.in_(ids))
            .where(ObligationModel.status == ObligationStatus.OUTSTANDING)
            .with_for_update()
        )
        models = result.scalars().all()

        for model in models:
            model.status = ObligationStatus.SETTLED
        await self.session.flush()

        return len(models)

    async def totals_by_status(self) -> Dict[ObligationStatus, Tuple[int, Decimal]]:
        """
        Count and amount total per status

        Returns:
            {status: (count, total)} with zeros for empty statuses
        """
        result = await self.session.execute(
            select(
                ObligationModel.status,
                func.count(ObligationModel.id).label("obligation_count"),
                func.coalesce(func.sum(ObligationModel.amount), 0).label("amount_total"),
            )
            .group_by(ObligationModel.status)
        )

        totals = {status: (0, Decimal("0")) for status in ObligationStatus}
        for row in result:
            totals[ObligationStatus(row.status)] = (
                int(row.obligation_count),
                Decimal(str(row.amount_total)),
            )
        return totals

    @staticmethod
    def _to_domain(model: ObligationModel) -> AnyObligation:
        """Convert database model to domain entity"""
        cls = (
            SettledObligation
            if model.status == ObligationStatus.SETTLED
            else OutstandingObligation
        )
        return cls(
            id=model.id,
            label=model.label,
            occurred_on=model.occurred_on,
            amount=Decimal(str(model.amount)),
        )
