"""
Obligation API Routes
Create, edit, delete and list obligations

Rules:
- New obligations are always OUTSTANDING
- SETTLED obligations cannot be edited or deleted (409)
"""

from fastapi import APIRouter, HTTPException, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from payledger.domain.exceptions import ObligationNotFoundError, SettledObligationError
from payledger.domain.models import AnyObligation, ObligationStatus
from payledger.infrastructure.db.database import get_db
from payledger.infrastructure.db.repositories.obligation_repository import ObligationRepository
from payledger.services.obligation_service import ObligationService

router = APIRouter()


# -------------------------------------------------------------------
# Request / Response models
# -------------------------------------------------------------------

class ObligationRequest(BaseModel):
    """Data for creating or editing an obligation"""
    label: str = Field(..., min_length=1, max_length=255, description="Description")
    occurred_on: date = Field(..., description="Date of the obligation (YYYY-MM-DD)")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount owed")


class ObligationResponse(BaseModel):
    id: int
    label: str
    occurred_on: date
    amount: Decimal
    status: ObligationStatus


class LedgerSummaryResponse(BaseModel):
    outstanding_count: int
    outstanding_total: Decimal
    settled_count: int
    settled_total: Decimal
    payable_amounts: List[Decimal]


def to_response(obligation: AnyObligation) -> ObligationResponse:
    return ObligationResponse(
        id=obligation.id,
        label=obligation.label,
        occurred_on=obligation.occurred_on,
        amount=obligation.amount,
        status=obligation.status,
    )


def get_obligation_service(db: AsyncSession = Depends(get_db)) -> ObligationService:
    return ObligationService(ObligationRepository(db))


def _error(status_code: int, exc: Exception) -> HTTPException:
    code = getattr(exc, "code", "VALIDATION_ERROR")
    message = getattr(exc, "message", str(exc))
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@router.get("", response_model=List[ObligationResponse])
async def list_obligations(
    label: Optional[str] = Query(None, description="Case-insensitive partial match"),
    occurred_on: Optional[date] = Query(None, description="Exact date (YYYY-MM-DD)"),
    status: Optional[ObligationStatus] = Query(None, description="OUTSTANDING or SETTLED"),
    service: ObligationService = Depends(get_obligation_service)
):
    obligations = await service.list(label=label, occurred_on=occurred_on, status=status)
    return [to_response(o) for o in obligations]


@router.get("/summary", response_model=LedgerSummaryResponse)
async def ledger_summary(service: ObligationService = Depends(get_obligation_service)):
    """Totals per status and the exact amounts that would be accepted as payment"""
    summary = await service.summary()
    return LedgerSummaryResponse(
        outstanding_count=summary.outstanding_count,
        outstanding_total=summary.outstanding_total,
        settled_count=summary.settled_count,
        settled_total=summary.settled_total,
        payable_amounts=list(summary.payable_amounts),
    )


@router.get("/{obligation_id}", response_model=ObligationResponse)
async def get_obligation(
    obligation_id: int,
    service: ObligationService = Depends(get_obligation_service)
):
    try:
        return to_response(await service.get(obligation_id))
    except ObligationNotFoundError as e:
        raise _error(404, e)


@router.post("", response_model=ObligationResponse, status_code=201)
async def create_obligation(
    request: ObligationRequest,
    service: ObligationService = Depends(get_obligation_service)
):
    try:
        obligation = await service.create(
            label=request.label,
            occurred_on=request.occurred_on,
            amount=request.amount,
        )
    except ValueError as e:
        raise _error(400, e)
    return to_response(obligation)


@router.put("/{obligation_id}", response_model=ObligationResponse)
async def update_obligation(
    obligation_id: int,
    request: ObligationRequest,
    service: ObligationService = Depends(get_obligation_service)
):
    try:
        obligation = await service.update(
            obligation_id,
            label=request.label,
            occurred_on=request.occurred_on,
            amount=request.amount,
        )
    except ObligationNotFoundError as e:
        raise _error(404, e)
    except SettledObligationError as e:
        raise _error(409, e)
    except ValueError as e:
        raise _error(400, e)
    return to_response(obligation)


@router.delete("/{obligation_id}", status_code=204)
async def delete_obligation(
    obligation_id: int,
    service: ObligationService = Depends(get_obligation_service)
):
    try:
        await service.delete(obligation_id)
    except ObligationNotFoundError as e:
        raise _error(404, e)
    except SettledObligationError as e:
        raise _error(409, e)
    return Response(status_code=204)
