# This project was developed with assistance from AI tools.
"""Schemas for fraud check endpoints."""

from datetime import datetime
from decimal import Decimal

from db.enums import LoanStatus, ReviewDecision
from pydantic import BaseModel, ConfigDict, Field


class FraudCheckRequest(BaseModel):
    """Request to run a fraud check."""

    borrower_id: int
    loan_id: int | None = None
    requested_amount: Decimal | None = Field(default=None, ge=0)


class RuleBreakdown(BaseModel):
    """Contribution of one rule to a composite risk score."""

    rule: str
    weight: int
    score: int
    flags: list[str] = Field(default_factory=list)
    details: str = ""


class BorrowerSummary(BaseModel):
    """Who a fraud check is about."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    phone: str | None = None
    blacklisted: bool = False


class LoanSummary(BaseModel):
    """The loan a fraud check was run against."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    loan_number: str
    principal_amount: Decimal | None = None
    status: LoanStatus | None = None


class FraudCheckItem(BaseModel):
    """A persisted fraud check."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    borrower_id: int
    loan_id: int | None = None
    risk_score: int
    is_suspicious: bool
    flags: list[str] = Field(default_factory=list)
    details: list[RuleBreakdown] | None = None
    checked_at: datetime | None = None
    borrower: BorrowerSummary | None = None
    loan: LoanSummary | None = None


class FraudCheckResponse(BaseModel):
    """Response for a single fraud check."""

    data: FraudCheckItem


class FraudCheckListResponse(BaseModel):
    """Response for listing fraud checks."""

    data: list[FraudCheckItem]
    count: int


class ReviewRequest(BaseModel):
    """Reviewer's disposition of a fraud check."""

    decision: ReviewDecision


class ReviewResponse(BaseModel):
    success: bool
    decision: ReviewDecision


class ReviewEventItem(BaseModel):
    """One recorded review decision."""

    id: int
    timestamp: datetime | None = None
    event_type: str
    user_id: str | None = None
    user_role: str | None = None
    event_data: dict | None = None


class ReviewHistoryResponse(BaseModel):
    check_id: int
    count: int
    events: list[ReviewEventItem]
