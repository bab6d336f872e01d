# This project was developed with assistance from AI tools.
"""Weighted multi-rule fraud risk scoring and review."""

from .review import FraudCheckNotFound, ReviewOutcome, get_review_history, review_fraud_check
from .rules import FRAUD_RULES, FraudContext, FraudRule, RuleResult
from .service import EvaluationFailed, get_fraud_check, get_fraud_checks, run_fraud_check
from .store import BorrowerProfile, SqlRiskDataStore

__all__ = [
    "FRAUD_RULES",
    "BorrowerProfile",
    "EvaluationFailed",
    "FraudCheckNotFound",
    "FraudContext",
    "FraudRule",
    "ReviewOutcome",
    "RuleResult",
    "SqlRiskDataStore",
    "get_fraud_check",
    "get_fraud_checks",
    "get_review_history",
    "review_fraud_check",
    "run_fraud_check",
]
