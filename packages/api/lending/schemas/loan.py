# This project was developed with assistance from AI tools.
"""Schemas for loan origination endpoints."""

from datetime import date, datetime
from decimal import Decimal

from db.enums import LoanStatus
from pydantic import BaseModel, ConfigDict, Field

from ..services.amortization import MAX_ANNUAL_RATE, MAX_PRINCIPAL, MAX_TERM_MONTHS
from .calculator import ScheduleItem


class LoanCreateRequest(BaseModel):
    """New loan application."""

    borrower_id: int
    principal_amount: Decimal = Field(gt=0, le=MAX_PRINCIPAL)
    interest_rate: Decimal = Field(ge=0, le=MAX_ANNUAL_RATE, description="Annual interest rate in percent.")
    term_months: int = Field(gt=0, le=MAX_TERM_MONTHS)
    start_date: date
    purpose: str | None = None


class FraudAlert(BaseModel):
    """Attached to a loan response when origination scored as suspicious."""

    fraud_check_id: int
    risk_score: int
    flags: list[str]
    message: str = "Fraud check flagged this loan application for review"


class LoanItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    loan_number: str
    borrower_id: int
    principal_amount: Decimal
    interest_rate: Decimal
    term_months: int
    start_date: datetime
    end_date: datetime
    status: LoanStatus
    purpose: str | None = None


class LoanCreateResponse(BaseModel):
    data: LoanItem
    monthly_payment: Decimal
    total_interest: Decimal
    total_payment: Decimal
    fraud_alert: FraudAlert | None = None


class LoanScheduleResponse(BaseModel):
    loan_id: int
    count: int
    schedule: list[ScheduleItem]
