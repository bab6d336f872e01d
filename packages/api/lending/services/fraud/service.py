# This project was developed with assistance from AI tools.
"""Fraud scoring orchestration.

Runs every rule in the rule table concurrently, folds the partial scores
into a weighted composite, and persists one FraudCheck row per run.  The
row is written only after all rules have resolved, so a failed or
cancelled run leaves nothing behind.
"""

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal

from db import FraudCheck
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...core.config import settings
from .rules import FRAUD_RULES, FraudContext, FraudRule, RuleResult
from .store import SqlRiskDataStore

logger = logging.getLogger(__name__)


class EvaluationFailed(Exception):
    """Raised when a data-store error prevents a rule from being evaluated."""


def composite_score(weighted_scores: list[tuple[int, int]]) -> int:
    """Weighted average of ``(score, weight)`` pairs, rounded half up."""
    total_weight = sum(weight for _, weight in weighted_scores)
    if total_weight == 0:
        return 0
    weighted = Decimal(sum(score * weight for score, weight in weighted_scores)) / total_weight
    return int(weighted.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def exceeds_threshold(risk_score: int) -> bool:
    return risk_score >= settings.FRAUD_SUSPICIOUS_THRESHOLD


async def evaluate_rules(
    store: SqlRiskDataStore,
    context: FraudContext,
    rules: tuple[FraudRule, ...] = FRAUD_RULES,
) -> list[tuple[FraudRule, RuleResult]]:
    """Run all rules concurrently and return results in rule-table order.

    Raises:
        EvaluationFailed: If any rule hit a data-store error.
    """
    outcomes = await asyncio.gather(
        *(rule.check(store, context) for rule in rules),
        return_exceptions=True,
    )

    for rule, outcome in zip(rules, outcomes):
        if isinstance(outcome, (SQLAlchemyError, OSError)):
            logger.error(
                "Fraud rule %r failed for borrower %s: %s",
                rule.name,
                context.borrower_id,
                outcome,
            )
            raise EvaluationFailed(f"Rule '{rule.name}' could not be evaluated") from outcome
        if isinstance(outcome, BaseException):
            raise outcome

    return list(zip(rules, outcomes))


def build_breakdown(results: list[tuple[FraudRule, RuleResult]]) -> list[dict]:
    """Per-rule audit breakdown stored verbatim on the FraudCheck."""
    return [
        {
            "rule": rule.name,
            "weight": rule.weight,
            "score": result.score,
            "flags": list(result.flags),
            "details": result.details,
        }
        for rule, result in results
    ]


async def run_fraud_check(
    session: AsyncSession,
    context: FraudContext,
    *,
    store: SqlRiskDataStore | None = None,
) -> FraudCheck:
    """Score a borrower (and optionally a loan) and persist the result.

    Args:
        session: Session the FraudCheck row is written through.
        context: Borrower id, optional loan id and requested amount.
        store: Read-only data store for the rules. Defaults to the SQL store.

    Returns:
        The flushed FraudCheck row.

    Raises:
        EvaluationFailed: A rule could not read its data; nothing is persisted.
    """
    store = store or SqlRiskDataStore()
    results = await evaluate_rules(store, context)

    risk_score = composite_score([(result.score, rule.weight) for rule, result in results])
    flags = [flag for _, result in results for flag in result.flags]
    suspicious = exceeds_threshold(risk_score)

    fraud_check = FraudCheck(
        borrower_id=context.borrower_id,
        loan_id=context.loan_id,
        risk_score=risk_score,
        is_suspicious=suspicious,
        flags=flags,
        details=build_breakdown(results),
    )
    session.add(fraud_check)
    await session.flush()
    # Server-side checked_at plus the borrower and loan summaries for the response.
    await session.refresh(fraud_check, attribute_names=["checked_at", "borrower", "loan"])

    logger.info(
        "Fraud check %s: borrower=%s loan=%s score=%d suspicious=%s flags=%s",
        fraud_check.id,
        context.borrower_id,
        context.loan_id,
        risk_score,
        suspicious,
        flags,
    )
    return fraud_check


def _with_summaries():
    return (selectinload(FraudCheck.borrower), selectinload(FraudCheck.loan))


async def get_fraud_checks(
    session: AsyncSession,
    *,
    borrower_id: int | None = None,
    loan_id: int | None = None,
    is_suspicious: bool | None = None,
) -> list[FraudCheck]:
    """Return fraud checks matching the given filters, newest first."""
    stmt = select(FraudCheck).options(*_with_summaries())
    if borrower_id is not None:
        stmt = stmt.where(FraudCheck.borrower_id == borrower_id)
    if loan_id is not None:
        stmt = stmt.where(FraudCheck.loan_id == loan_id)
    if is_suspicious is not None:
        stmt = stmt.where(FraudCheck.is_suspicious == is_suspicious)
    stmt = stmt.order_by(FraudCheck.checked_at.desc(), FraudCheck.id.desc())

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_fraud_check(session: AsyncSession, check_id: int) -> FraudCheck | None:
    """Return a single fraud check, or None if it does not exist."""
    stmt = select(FraudCheck).options(*_with_summaries()).where(FraudCheck.id == check_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
