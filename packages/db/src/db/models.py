# This project was developed with assistance from AI tools.
"""
Microfinance risk core -- domain models

Borrowers, loans with their installment schedules, fraud risk checks,
and the append-only audit trail.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import LoanStatus


class Borrower(Base):
    """Borrower profile. Phone is the primary deduplication key."""

    __tablename__ = "borrowers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    id_number = Column(String(100), nullable=True, index=True)
    monthly_income = Column(Numeric(12, 2), nullable=True)
    blacklisted = Column(Boolean, nullable=False, default=False)
    blacklist_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    loans = relationship("Loan", back_populates="borrower")
    fraud_checks = relationship("FraudCheck", back_populates="borrower")

    def __repr__(self):
        return f"<Borrower(id={self.id}, name='{self.first_name} {self.last_name}')>"


class Loan(Base):
    """Loan issued to exactly one borrower."""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_number = Column(String(50), unique=True, nullable=False)
    borrower_id = Column(
        Integer, ForeignKey("borrowers.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    principal_amount = Column(Numeric(14, 2), nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=False)
    term_months = Column(Integer, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        Enum(LoanStatus, name="loan_status", native_enum=False),
        nullable=False,
        default=LoanStatus.PENDING,
        index=True,
    )
    purpose = Column(Text, nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    borrower = relationship("Borrower", back_populates="loans")
    schedule = relationship(
        "LoanSchedule", back_populates="loan", cascade="all, delete-orphan",
        order_by="LoanSchedule.installment_number",
    )

    def __repr__(self):
        return f"<Loan(id={self.id}, number='{self.loan_number}', status='{self.status}')>"


class LoanSchedule(Base):
    """One amortization installment. Written at loan creation, never updated."""

    __tablename__ = "loan_schedules"
    __table_args__ = (
        UniqueConstraint("loan_id", "installment_number", name="uq_loan_schedule_installment"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(
        Integer, ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    installment_number = Column(Integer, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    principal_due = Column(Numeric(14, 2), nullable=False)
    interest_due = Column(Numeric(14, 2), nullable=False)
    total_due = Column(Numeric(14, 2), nullable=False)

    loan = relationship("Loan", back_populates="schedule")

    def __repr__(self):
        return f"<LoanSchedule(loan_id={self.loan_id}, n={self.installment_number})>"


class FraudCheck(Base):
    """Outcome of one fraud scoring run. INSERT + SELECT only."""

    __tablename__ = "fraud_checks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    borrower_id = Column(
        Integer, ForeignKey("borrowers.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    loan_id = Column(
        Integer, ForeignKey("loans.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    risk_score = Column(Integer, nullable=False)
    is_suspicious = Column(Boolean, nullable=False, index=True)
    flags = Column(JSON, nullable=False, default=list)
    details = Column(JSON, nullable=True)
    checked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    borrower = relationship("Borrower", back_populates="fraud_checks")
    loan = relationship("Loan")

    def __repr__(self):
        return f"<FraudCheck(id={self.id}, score={self.risk_score}, suspicious={self.is_suspicious})>"


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(String(255), nullable=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    entity_type = Column(String(100), nullable=True)
    entity_id = Column(String(100), nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
