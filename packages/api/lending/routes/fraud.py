# This project was developed with assistance from AI tools.
"""Fraud check REST endpoints."""

from db import get_db
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser
from ..schemas.fraud import (
    FraudCheckItem,
    FraudCheckListResponse,
    FraudCheckRequest,
    FraudCheckResponse,
    ReviewEventItem,
    ReviewHistoryResponse,
    ReviewRequest,
    ReviewResponse,
)
from ..services.fraud import (
    EvaluationFailed,
    FraudCheckNotFound,
    FraudContext,
    get_fraud_check,
    get_fraud_checks,
    get_review_history,
    review_fraud_check,
    run_fraud_check,
)

router = APIRouter()


def _list_response(checks) -> FraudCheckListResponse:
    items = [FraudCheckItem.model_validate(c) for c in checks]
    return FraudCheckListResponse(data=items, count=len(items))


@router.get("", response_model=FraudCheckListResponse)
async def list_fraud_checks(
    suspicious: bool | None = Query(default=None, description="Filter by suspicious verdict"),
    borrower_id: int | None = Query(default=None),
    loan_id: int | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> FraudCheckListResponse:
    """List fraud checks, newest first."""
    checks = await get_fraud_checks(
        session,
        borrower_id=borrower_id,
        loan_id=loan_id,
        is_suspicious=suspicious,
    )
    return _list_response(checks)


@router.post("", response_model=FraudCheckResponse, status_code=status.HTTP_201_CREATED)
async def create_fraud_check(
    req: FraudCheckRequest,
    session: AsyncSession = Depends(get_db),
) -> FraudCheckResponse:
    """Run a manual fraud check and persist the result."""
    context = FraudContext(
        borrower_id=req.borrower_id,
        loan_id=req.loan_id,
        requested_amount=req.requested_amount or None,
    )
    try:
        fraud_check = await run_fraud_check(session, context)
    except EvaluationFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Borrower or loan not found",
        ) from exc
    return FraudCheckResponse(data=FraudCheckItem.model_validate(fraud_check))


@router.get("/borrower/{borrower_id}", response_model=FraudCheckListResponse)
async def list_borrower_fraud_checks(
    borrower_id: int,
    session: AsyncSession = Depends(get_db),
) -> FraudCheckListResponse:
    """List every fraud check for one borrower, newest first."""
    checks = await get_fraud_checks(session, borrower_id=borrower_id)
    return _list_response(checks)


@router.get("/{check_id}", response_model=FraudCheckResponse)
async def get_fraud_check_detail(
    check_id: int,
    session: AsyncSession = Depends(get_db),
) -> FraudCheckResponse:
    """Get a single fraud check with its per-rule breakdown."""
    fraud_check = await get_fraud_check(session, check_id)
    if fraud_check is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fraud check not found",
        )
    return FraudCheckResponse(data=FraudCheckItem.model_validate(fraud_check))


@router.put("/{check_id}", response_model=ReviewResponse)
async def review_fraud_check_route(
    check_id: int,
    req: ReviewRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ReviewResponse:
    """Record a CLEAR or CONFIRM decision. CONFIRM blacklists the borrower."""
    try:
        outcome = await review_fraud_check(session, check_id, user, req.decision)
    except FraudCheckNotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return ReviewResponse(success=outcome.success, decision=outcome.decision)


@router.get("/{check_id}/reviews", response_model=ReviewHistoryResponse)
async def list_fraud_check_reviews(
    check_id: int,
    session: AsyncSession = Depends(get_db),
) -> ReviewHistoryResponse:
    """Review decisions recorded against a fraud check, oldest first."""
    if await get_fraud_check(session, check_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fraud check not found",
        )
    events = await get_review_history(session, check_id)
    items = [
        ReviewEventItem(
            id=e.id,
            timestamp=e.timestamp,
            event_type=e.event_type,
            user_id=e.user_id,
            user_role=e.user_role,
            event_data=e.event_data,
        )
        for e in events
    ]
    return ReviewHistoryResponse(check_id=check_id, count=len(items), events=items)
