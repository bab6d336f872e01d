# This project was developed with assistance from AI tools.
"""
Domain enums for the microfinance loan lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class LoanStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DEFAULTED = "DEFAULTED"
    REJECTED = "REJECTED"
    WRITTEN_OFF = "WRITTEN_OFF"


class ReviewDecision(str, enum.Enum):
    CLEAR = "CLEAR"
    CONFIRM = "CONFIRM"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    LOAN_OFFICER = "loan_officer"
    COMPLIANCE_OFFICER = "compliance_officer"
