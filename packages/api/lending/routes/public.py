# This project was developed with assistance from AI tools.
"""Public API routes -- no caller identity required."""

from fastapi import APIRouter, HTTPException

from ..schemas.calculator import LoanCalculationRequest, LoanCalculationResponse, ScheduleItem
from ..services.amortization import InvalidLoanParameters, compute_amortization

router = APIRouter()


@router.post("/calculate-loan", response_model=LoanCalculationResponse)
async def calculate_loan(req: LoanCalculationRequest) -> LoanCalculationResponse:
    """Preview the monthly payment and repayment schedule. Nothing is stored."""
    try:
        result = compute_amortization(
            req.principal, req.annual_rate, req.term_months, req.start_date
        )
    except InvalidLoanParameters as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return LoanCalculationResponse(
        monthly_payment=result.monthly_payment,
        total_interest=result.total_interest,
        total_payment=result.total_payment,
        schedule=[
            ScheduleItem(
                installment_number=row.installment_number,
                due_date=row.due_date,
                principal_due=row.principal_due,
                interest_due=row.interest_due,
                total_due=row.total_due,
                remaining_balance=row.remaining_balance,
            )
            for row in result.schedule
        ],
    )
