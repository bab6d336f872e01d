# This project was developed with assistance from AI tools.
"""Loan origination service.

Creates a loan, writes its installment schedule once, and scores the new
application for fraud.  The fraud check is advisory: if it cannot run, the
loan is still created.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, time

from db import FraudCheck, Loan, LoanSchedule
from db.enums import LoanStatus
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.loan import LoanCreateRequest
from .amortization import AmortizationResult, add_months, compute_amortization, generate_loan_number
from .fraud import EvaluationFailed, FraudContext, run_fraud_check

logger = logging.getLogger(__name__)


@dataclass
class OriginationResult:
    loan: Loan
    calculation: AmortizationResult
    fraud_check: FraudCheck | None


def _start_of_day(value) -> datetime:
    return datetime.combine(value, time.min, tzinfo=UTC)


async def create_loan(
    session: AsyncSession,
    user: UserContext,
    req: LoanCreateRequest,
) -> OriginationResult:
    """Create a PENDING loan with its schedule, then run a fraud check on it.

    Raises:
        InvalidLoanParameters: If the amortization inputs are out of range.
    """
    # Compute first so bad parameters fail before anything is written.
    calculation = compute_amortization(
        req.principal_amount, req.interest_rate, req.term_months, req.start_date
    )
    start = _start_of_day(req.start_date)

    loan = Loan(
        loan_number=generate_loan_number(),
        borrower_id=req.borrower_id,
        principal_amount=req.principal_amount,
        interest_rate=req.interest_rate,
        term_months=req.term_months,
        start_date=start,
        end_date=add_months(start, req.term_months),
        status=LoanStatus.PENDING,
        purpose=req.purpose,
        created_by=user.user_id,
    )
    session.add(loan)
    await session.flush()

    session.add_all(
        [
            LoanSchedule(
                loan_id=loan.id,
                installment_number=row.installment_number,
                due_date=_start_of_day(row.due_date),
                principal_due=row.principal_due,
                interest_due=row.interest_due,
                total_due=row.total_due,
            )
            for row in calculation.schedule
        ]
    )
    # Commit before scoring: the rules read through their own sessions and
    # the velocity window counts this loan.
    await session.commit()
    # Detached so a rollback of the fraud check below cannot expire it.
    session.expunge(loan)
    logger.info(
        "Loan %s created for borrower %s (%s installments)",
        loan.loan_number,
        req.borrower_id,
        len(calculation.schedule),
    )

    fraud_check = None
    try:
        fraud_check = await run_fraud_check(
            session,
            FraudContext(
                borrower_id=req.borrower_id,
                loan_id=loan.id,
                requested_amount=req.principal_amount,
            ),
        )
        await session.commit()
    except EvaluationFailed:
        logger.exception("Fraud check failed for loan %s (non-blocking)", loan.loan_number)
    except SQLAlchemyError:
        fraud_check = None
        await session.rollback()
        logger.exception(
            "Fraud check for loan %s could not be saved (non-blocking)", loan.loan_number
        )

    return OriginationResult(loan=loan, calculation=calculation, fraud_check=fraud_check)


async def get_loan_schedule(session: AsyncSession, loan_id: int) -> list[LoanSchedule] | None:
    """Return a loan's installments in order, or None if the loan does not exist."""
    loan_result = await session.execute(select(Loan.id).where(Loan.id == loan_id))
    if loan_result.scalar_one_or_none() is None:
        return None

    stmt = (
        select(LoanSchedule)
        .where(LoanSchedule.loan_id == loan_id)
        .order_by(LoanSchedule.installment_number.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
