# This project was developed with assistance from AI tools.
"""Fraud risk rules.

Each rule is an async function ``(store, context) -> RuleResult`` that reads
from the data store and never writes.  Scores run 0-100, where 100 is the
most suspicious.  Missing optional data (no borrower, no income, no
requested amount) is scored, not raised.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from db.enums import LoanStatus

from ...core.config import settings
from .store import BorrowerProfile, SqlRiskDataStore


@dataclass(frozen=True)
class FraudContext:
    """What is being scored: a borrower, optionally a loan and a requested amount."""

    borrower_id: int
    loan_id: int | None = None
    requested_amount: Decimal | None = None
    as_of: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class RuleResult:
    """Partial score from a single rule."""

    score: int
    flags: list[str] = field(default_factory=list)
    details: str = ""


@dataclass(frozen=True)
class FraudRule:
    name: str
    weight: int
    check: Callable[[SqlRiskDataStore, FraudContext], Awaitable[RuleResult]]


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Velocity
# ---------------------------------------------------------------------------


def score_velocity(recent_loan_count: int) -> RuleResult:
    """Score the number of loan applications in the trailing window."""
    if recent_loan_count <= 1:
        score = 0
    elif recent_loan_count == 2:
        score = 30
    elif recent_loan_count == 3:
        score = 60
    else:
        score = 100

    flags = ["VELOCITY_HIGH"] if score >= 60 else []
    return RuleResult(
        score=score,
        flags=flags,
        details=(
            f"Borrower has {recent_loan_count} loan application(s) in the last "
            f"{settings.FRAUD_VELOCITY_WINDOW_DAYS} days"
        ),
    )


async def check_velocity(store: SqlRiskDataStore, context: FraudContext) -> RuleResult:
    # The window includes the loan under evaluation when it is already stored.
    since = context.as_of - timedelta(days=settings.FRAUD_VELOCITY_WINDOW_DAYS)
    count = await store.count_loans_created_since(context.borrower_id, since)
    return score_velocity(count)


# ---------------------------------------------------------------------------
# Identity duplication
# ---------------------------------------------------------------------------

# (field, points, flag, label) in evaluation order
_IDENTITY_CHECKS = (
    ("phone", 40, "DUPLICATE_PHONE", "Phone"),
    ("email", 30, "DUPLICATE_EMAIL", "Email"),
    ("id_number", 100, "DUPLICATE_ID", "ID number"),
)


def score_identity_duplication(match_counts: dict[str, int]) -> RuleResult:
    """Score duplicate identity values given per-field counts of other borrowers."""
    score = 0
    flags: list[str] = []
    matches: list[str] = []
    for field_name, points, flag, label in _IDENTITY_CHECKS:
        count = match_counts.get(field_name, 0)
        if count > 0:
            score += points
            flags.append(flag)
            matches.append(f"{label} matched {count} other borrower(s)")

    if matches:
        details = f"Identity duplication detected: {'; '.join(matches)}"
    else:
        details = "No identity duplication detected"
    return RuleResult(score=min(score, 100), flags=flags, details=details)


async def check_identity_duplication(store: SqlRiskDataStore, context: FraudContext) -> RuleResult:
    profile = await store.get_borrower_profile(context.borrower_id)
    if profile is None:
        return RuleResult(score=0, details="Borrower not found")

    counts: dict[str, int] = {}
    for field_name, *_ in _IDENTITY_CHECKS:
        value = getattr(profile, field_name)
        if value:
            counts[field_name] = await store.count_borrowers_sharing(
                field_name, value, exclude_id=profile.id
            )
    return score_identity_duplication(counts)


# ---------------------------------------------------------------------------
# Amount anomaly
# ---------------------------------------------------------------------------


def score_amount_anomaly(
    requested_amount: Decimal | None,
    monthly_income: Decimal | None,
) -> RuleResult:
    """Score the requested amount against yearly income.

    No requested amount is low risk (0).  No income data is mildly
    suspicious in itself and gets a flat baseline of 20.
    """
    if requested_amount is None:
        return RuleResult(score=0, details="No requested amount provided for analysis")

    if not monthly_income:
        return RuleResult(
            score=20,
            details="No income data available for borrower; assigning baseline score",
        )

    yearly_income = Decimal(monthly_income) * 12
    ratio = Decimal(requested_amount) / yearly_income

    flags: list[str] = []
    if ratio > 5:
        score = 100
        flags.append("AMOUNT_EXTREME")
    elif ratio > 3:
        score = 70
        flags.append("AMOUNT_HIGH")
    elif ratio > 2:
        score = 40
    else:
        score = 0

    return RuleResult(
        score=score,
        flags=flags,
        details=(
            f"Requested amount is {ratio:.2f}x yearly income "
            "(ratio threshold: >5 extreme, >3 high, >2 moderate)"
        ),
    )


async def check_amount_anomaly(store: SqlRiskDataStore, context: FraudContext) -> RuleResult:
    if context.requested_amount is None:
        return score_amount_anomaly(None, None)
    profile = await store.get_borrower_profile(context.borrower_id)
    income = profile.monthly_income if profile is not None else None
    return score_amount_anomaly(context.requested_amount, income)


# ---------------------------------------------------------------------------
# Payment history
# ---------------------------------------------------------------------------


def score_payment_history(defaulted_count: int) -> RuleResult:
    """Score the number of loans the borrower has defaulted on."""
    flags: list[str] = []
    if defaulted_count == 0:
        score = 0
    elif defaulted_count == 1:
        score = 40
    elif defaulted_count == 2:
        score = 70
    else:
        score = 100
        flags.append("SERIAL_DEFAULTER")

    return RuleResult(
        score=score,
        flags=flags,
        details=f"Borrower has {defaulted_count} defaulted loan(s)",
    )


async def check_payment_history(store: SqlRiskDataStore, context: FraudContext) -> RuleResult:
    count = await store.count_loans_by_status(context.borrower_id, LoanStatus.DEFAULTED)
    return score_payment_history(count)


# ---------------------------------------------------------------------------
# Information consistency
# ---------------------------------------------------------------------------


def score_information_consistency(
    profile: BorrowerProfile | None,
    active_loan_count: int,
    as_of: datetime,
) -> RuleResult:
    """Score blacklisting and mid-loan profile edits.

    A blacklisted borrower short-circuits to 100.  Otherwise a profile edited
    within the change window while a loan is ACTIVE scores 60.
    """
    if profile is None:
        return RuleResult(score=0, details="Borrower not found")

    if profile.blacklisted:
        return RuleResult(score=100, flags=["BLACKLISTED"], details="Borrower is blacklisted")

    if _recently_updated(profile, as_of) and active_loan_count > 0:
        return RuleResult(
            score=60,
            flags=["RECENT_PROFILE_CHANGE"],
            details=(
                f"Profile updated within last {settings.FRAUD_PROFILE_CHANGE_WINDOW_DAYS} days "
                f"with {active_loan_count} active loan(s)"
            ),
        )

    return RuleResult(score=0, details="No consistency issues detected")


def _recently_updated(profile: BorrowerProfile, as_of: datetime) -> bool:
    if profile.updated_at is None:
        return False
    cutoff = as_of - timedelta(days=settings.FRAUD_PROFILE_CHANGE_WINDOW_DAYS)
    return _as_aware(profile.updated_at) >= _as_aware(cutoff)


async def check_information_consistency(
    store: SqlRiskDataStore, context: FraudContext
) -> RuleResult:
    profile = await store.get_borrower_profile(context.borrower_id)
    active_loans = 0
    if profile is not None and not profile.blacklisted and _recently_updated(profile, context.as_of):
        active_loans = await store.count_loans_by_status(context.borrower_id, LoanStatus.ACTIVE)
    return score_information_consistency(profile, active_loans, context.as_of)


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

FRAUD_RULES: tuple[FraudRule, ...] = (
    FraudRule("Velocity Check", 25, check_velocity),
    FraudRule("Identity Duplication", 30, check_identity_duplication),
    FraudRule("Amount Anomaly", 20, check_amount_anomaly),
    FraudRule("Payment History", 15, check_payment_history),
    FraudRule("Information Consistency", 10, check_information_consistency),
)
