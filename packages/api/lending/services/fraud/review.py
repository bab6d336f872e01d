# This project was developed with assistance from AI tools.
"""Human review of fraud checks.

A review never edits the FraudCheck it refers to.  Every decision is
appended to the audit trail (repeats included), and a CONFIRM blacklists
the borrower with a single-row UPDATE.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from db import Borrower, FraudCheck
from db.enums import ReviewDecision
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...schemas.auth import UserContext
from ..audit import get_events_for_entity, write_audit_event

logger = logging.getLogger(__name__)

FRAUD_CHECK_ENTITY = "FraudCheck"


class FraudCheckNotFound(Exception):
    """Raised when a review targets a fraud check id that does not exist."""


@dataclass(frozen=True)
class ReviewOutcome:
    success: bool
    decision: ReviewDecision


async def review_fraud_check(
    session: AsyncSession,
    check_id: int,
    reviewer: UserContext,
    decision: ReviewDecision,
) -> ReviewOutcome:
    """Record a reviewer's decision on a fraud check.

    Args:
        session: Database session.
        check_id: FraudCheck being reviewed.
        reviewer: The user making the decision.
        decision: CLEAR leaves the borrower untouched; CONFIRM blacklists them.

    Raises:
        FraudCheckNotFound: If ``check_id`` does not exist.
    """
    result = await session.execute(
        select(FraudCheck.id, FraudCheck.borrower_id).where(FraudCheck.id == check_id)
    )
    row = result.one_or_none()
    if row is None:
        raise FraudCheckNotFound(f"Fraud check {check_id} not found")
    borrower_id = row.borrower_id

    await write_audit_event(
        session,
        event_type=f"FRAUD_REVIEW_{decision.value}",
        user_id=reviewer.user_id,
        user_role=reviewer.role.value,
        entity_type=FRAUD_CHECK_ENTITY,
        entity_id=check_id,
        event_data={
            "decision": decision.value,
            "borrower_id": borrower_id,
            "reviewed_at": datetime.now(UTC).isoformat(),
        },
    )

    if decision == ReviewDecision.CONFIRM:
        await session.execute(
            update(Borrower)
            .where(Borrower.id == borrower_id)
            .values(
                blacklisted=True,
                blacklist_reason=f"Confirmed fraud - Fraud check {check_id}",
            )
        )

    logger.info(
        "Fraud check %s reviewed by %s: %s (borrower=%s)",
        check_id,
        reviewer.user_id,
        decision.value,
        borrower_id,
    )
    return ReviewOutcome(success=True, decision=decision)


async def get_review_history(session: AsyncSession, check_id: int) -> list:
    """Return every review recorded against a fraud check, oldest first."""
    return await get_events_for_entity(session, FRAUD_CHECK_ENTITY, check_id)
