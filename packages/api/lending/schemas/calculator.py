# This project was developed with assistance from AI tools.
"""Loan calculator schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ..services.amortization import MAX_ANNUAL_RATE, MAX_PRINCIPAL, MAX_TERM_MONTHS


class LoanCalculationRequest(BaseModel):
    """Input for the amortization calculator."""

    principal: Decimal = Field(gt=0, le=MAX_PRINCIPAL)
    annual_rate: Decimal = Field(ge=0, le=MAX_ANNUAL_RATE, description="Annual interest rate in percent.")
    term_months: int = Field(gt=0, le=MAX_TERM_MONTHS)
    start_date: date


class ScheduleItem(BaseModel):
    """One installment in a repayment schedule."""

    installment_number: int
    due_date: date
    principal_due: Decimal
    interest_due: Decimal
    total_due: Decimal
    remaining_balance: Decimal | None = None


class LoanCalculationResponse(BaseModel):
    """Amortization results."""

    monthly_payment: Decimal
    total_interest: Decimal
    total_payment: Decimal
    schedule: list[ScheduleItem]
