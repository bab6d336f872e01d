# This project was developed with assistance from AI tools.
"""Loan origination REST endpoints."""

from db import get_db
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser
from ..schemas.calculator import ScheduleItem
from ..schemas.loan import (
    FraudAlert,
    LoanCreateRequest,
    LoanCreateResponse,
    LoanItem,
    LoanScheduleResponse,
)
from ..services.amortization import InvalidLoanParameters
from ..services.loan import create_loan, get_loan_schedule

router = APIRouter()


@router.post("", response_model=LoanCreateResponse, status_code=status.HTTP_201_CREATED)
async def originate_loan(
    req: LoanCreateRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> LoanCreateResponse:
    """Create a loan with its repayment schedule and score it for fraud."""
    try:
        result = await create_loan(session, user, req)
    except InvalidLoanParameters as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Borrower not found",
        ) from exc

    fraud_alert = None
    check = result.fraud_check
    if check is not None and check.is_suspicious:
        fraud_alert = FraudAlert(
            fraud_check_id=check.id,
            risk_score=check.risk_score,
            flags=list(check.flags or []),
        )

    return LoanCreateResponse(
        data=LoanItem.model_validate(result.loan),
        monthly_payment=result.calculation.monthly_payment,
        total_interest=result.calculation.total_interest,
        total_payment=result.calculation.total_payment,
        fraud_alert=fraud_alert,
    )


@router.get("/{loan_id}/schedule", response_model=LoanScheduleResponse)
async def loan_schedule(
    loan_id: int,
    session: AsyncSession = Depends(get_db),
) -> LoanScheduleResponse:
    """Return the loan's installment schedule in due order."""
    rows = await get_loan_schedule(session, loan_id)
    if rows is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Loan not found",
        )
    items = [
        ScheduleItem(
            installment_number=r.installment_number,
            due_date=r.due_date.date(),
            principal_due=r.principal_due,
            interest_due=r.interest_due,
            total_due=r.total_due,
        )
        for r in rows
    ]
    return LoanScheduleResponse(loan_id=loan_id, count=len(items), schedule=items)
