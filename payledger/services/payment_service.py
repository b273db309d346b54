"""
SERVICE - PAYMENT APPLICATION

read outstanding → allocate → apply settlements, as one unit of work.

• Amount validated before the engine runs
• All-or-nothing: a partial apply rolls back every settlement
• Store failures are reported apart from business rejections
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, AsyncContextManager, List, Optional, Protocol, Sequence
import logging

from sqlalchemy.exc import SQLAlchemyError

from payledger.domain.exceptions import (
    InvalidPaymentAmountError,
    ObligationStoreError,
    SettlementConflictError,
)
from payledger.domain.models import (
    AllocationOutcome,
    OutcomeCategory,
    OutstandingObligation,
    SettledObligation,
)
from payledger.domain.services.allocation_engine import AllocationEngine
from payledger.domain.services.outcome_classifier import classify, format_message

logger = logging.getLogger(__name__)


class ObligationStore(Protocol):
    """What the payment flow needs from persistence - ASYNC"""

    def transaction(self) -> AsyncContextManager[Any]:
        """Unit of work spanning read and apply"""
        ...

    async def list_outstanding(self, lock: bool = False) -> List[OutstandingObligation]:
        """Outstanding obligations, oldest first"""
        ...

    async def mark_settled(self, settled: Sequence[SettledObligation]) -> int:
        """Persist settlements, return how many were confirmed"""
        ...


@dataclass(frozen=True)
class PaymentReceipt:
    """Outcome plus its classification"""
    outcome: AllocationOutcome
    category: OutcomeCategory
    message: str


def parse_amount(raw: Any) -> Decimal:
    """
    Validate a payment amount

    Raises:
        InvalidPaymentAmountError: not a finite, strictly positive decimal
    """
    if isinstance(raw, bool):
        raise InvalidPaymentAmountError(raw)
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise InvalidPaymentAmountError(raw)

    if not amount.is_finite() or amount <= Decimal("0"):
        raise InvalidPaymentAmountError(raw)
    return amount


class PaymentService:
    """Applies one payment against the outstanding obligations"""

    def __init__(
        self,
        store: ObligationStore,
        engine: Optional[AllocationEngine] = None
    ):
        self.store = store
        self.engine = engine or AllocationEngine()

    async def pay(self, raw_amount: Any) -> PaymentReceipt:
        """
        Allocate and apply a payment

        Raises:
            InvalidPaymentAmountError: amount <= 0 or malformed
            SettlementConflictError: store confirmed fewer settlements than decided
            ObligationStoreError: database failure; nothing was settled
        """
        amount = parse_amount(raw_amount)

        try:
            async with self.store.transaction():
                outstanding = await self.store.list_outstanding(lock=True)
                outcome = self.engine.allocate(outstanding, amount)
                category = classify(outcome)

                if outcome.settled_count:
                    settled = [obligation.settle() for obligation in outcome.settled]
                    confirmed = await self.store.mark_settled(settled)
                    if confirmed != outcome.settled_count:
                        raise SettlementConflictError(outcome.settled_ids, confirmed)
        except SettlementConflictError as exc:
            logger.error("Settlement rolled back: %s", exc.message)
            raise
        except SQLAlchemyError as exc:
            logger.exception("Obligation store failed while applying payment of %s", amount)
            raise ObligationStoreError("payment") from exc

        message = format_message(category, outcome)

        logger.info(
            "Payment processed | amount=%s | category=%s | settled=%s | required=%s",
            amount,
            category.value,
            outcome.settled_count,
            outcome.required_amount,
        )

        return PaymentReceipt(outcome=outcome, category=category, message=message)
