# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import LoanStatus, ReviewDecision, UserRole
from .models import AuditEvent, Borrower, FraudCheck, Loan, LoanSchedule

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "LoanStatus",
    "ReviewDecision",
    "UserRole",
    # Models
    "AuditEvent",
    "Borrower",
    "FraudCheck",
    "Loan",
    "LoanSchedule",
]
