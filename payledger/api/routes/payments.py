"""
Payment API Routes
Apply a payment to outstanding obligations, oldest first

Only exact payments are accepted: the amount must equal the sum of the
oldest N outstanding obligations. Anything else settles nothing.
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional

from payledger.domain.exceptions import (
    InvalidPaymentAmountError,
    ObligationStoreError,
    SettlementConflictError,
)
from payledger.domain.models import OutcomeCategory
from payledger.domain.services.outcome_classifier import http_status_for
from payledger.infrastructure.db.database import get_db
from payledger.infrastructure.db.repositories.obligation_repository import ObligationRepository
from payledger.services.payment_service import PaymentService

router = APIRouter()


class PaymentRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount to pay")


class PaymentResponse(BaseModel):
    category: OutcomeCategory
    message: str
    settled_count: int
    settled_ids: List[int]
    remaining_amount: Decimal
    requested_amount: Decimal
    required_amount: Optional[Decimal] = None


def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(ObligationRepository(db))


@router.post(
    "",
    response_model=PaymentResponse,
    responses={
        400: {"description": "Insufficient amount or invalid amount"},
        422: {"description": "Amount exceeds the exact payable amount"},
        409: {"description": "Settlement could not be fully applied"},
        503: {"description": "Obligation store unavailable"},
    },
)
async def submit_payment(
    request: PaymentRequest,
    service: PaymentService = Depends(get_payment_service)
):
    """
    Settle outstanding obligations with an exact payment.

    Status codes follow the outcome category:
    - 200: obligations settled, or nothing to pay
    - 422: amount exceeds the exact amount payable
    - 400: amount does not cover the oldest obligation
    """
    try:
        receipt = await service.pay(request.amount)
    except InvalidPaymentAmountError as e:
        raise HTTPException(status_code=400, detail={"code": e.code, "message": e.message})
    except SettlementConflictError as e:
        raise HTTPException(status_code=409, detail={"code": e.code, "message": e.message})
    except ObligationStoreError as e:
        raise HTTPException(status_code=503, detail={"code": e.code, "message": e.message})

    outcome = receipt.outcome
    body = PaymentResponse(
        category=receipt.category,
        message=receipt.message,
        settled_count=outcome.settled_count,
        settled_ids=list(outcome.settled_ids),
        remaining_amount=outcome.remaining_amount,
        requested_amount=outcome.requested_amount,
        required_amount=outcome.required_amount,
    )

    return JSONResponse(
        status_code=http_status_for(receipt.category),
        content=body.model_dump(mode="json"),
    )
