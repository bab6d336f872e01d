# This project was developed with assistance from AI tools.
"""Read-only data access for fraud rule evaluation.

Design note -- session-per-query:
    The orchestrator runs all rules concurrently, and an ``AsyncSession``
    must not be shared between concurrent tasks.  Each lookup therefore
    opens its own short-lived session from the factory and closes it before
    returning.  Nothing here writes.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from db import Borrower, Loan
from db.database import SessionLocal
from db.enums import LoanStatus
from sqlalchemy import func, select

# Borrower columns that identify a person; each must be checked for duplicates.
IDENTITY_FIELDS = ("phone", "email", "id_number")


@dataclass(frozen=True)
class BorrowerProfile:
    """The borrower fields the fraud rules need, detached from any session."""

    id: int
    phone: str
    email: str | None
    id_number: str | None
    monthly_income: Decimal | None
    blacklisted: bool
    updated_at: datetime | None


class SqlRiskDataStore:
    """SQLAlchemy-backed lookups over borrowers and loans."""

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    async def get_borrower_profile(self, borrower_id: int) -> BorrowerProfile | None:
        """Return the borrower's identity/financial/status fields, or None if absent."""
        stmt = select(Borrower).where(Borrower.id == borrower_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            borrower = result.scalar_one_or_none()
        if borrower is None:
            return None
        return BorrowerProfile(
            id=borrower.id,
            phone=borrower.phone,
            email=borrower.email,
            id_number=borrower.id_number,
            monthly_income=borrower.monthly_income,
            blacklisted=bool(borrower.blacklisted),
            updated_at=borrower.updated_at,
        )

    async def count_borrowers_sharing(self, field: str, value: str, exclude_id: int) -> int:
        """Count borrowers other than ``exclude_id`` whose ``field`` equals ``value``."""
        if field not in IDENTITY_FIELDS:
            raise ValueError(f"Not an identity field: {field}")
        column = getattr(Borrower, field)
        stmt = select(func.count(Borrower.id)).where(column == value, Borrower.id != exclude_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def count_loans_created_since(self, borrower_id: int, since: datetime) -> int:
        """Count the borrower's loans created at or after ``since``."""
        stmt = select(func.count(Loan.id)).where(
            Loan.borrower_id == borrower_id,
            Loan.created_at >= since,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def count_loans_by_status(self, borrower_id: int, status: LoanStatus) -> int:
        """Count the borrower's loans currently in ``status``."""
        stmt = select(func.count(Loan.id)).where(
            Loan.borrower_id == borrower_id,
            Loan.status == status,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0
