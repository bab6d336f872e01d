# This project was developed with assistance from AI tools.
"""Tests for fraud check REST endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db.enums import ReviewDecision
from sqlalchemy.exc import IntegrityError

from lending.services.fraud import EvaluationFailed, FraudCheckNotFound, ReviewOutcome

from .factories import NOW, make_mock_borrower, make_mock_fraud_check, make_mock_loan

ROUTES = "lending.routes.fraud"


class TestCreateFraudCheck:
    """POST /api/fraud"""

    def test_returns_persisted_check(self, client):
        check = make_mock_fraud_check(id=3, risk_score=72, is_suspicious=True, flags=["VELOCITY_HIGH"])
        with patch(f"{ROUTES}.run_fraud_check", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = check
            resp = client.post(
                "/api/fraud",
                json={"borrower_id": 7, "loan_id": 2, "requested_amount": "5000"},
            )

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["id"] == 3
        assert data["risk_score"] == 72
        assert data["is_suspicious"] is True
        assert data["flags"] == ["VELOCITY_HIGH"]
        assert data["details"][0]["rule"] == "Velocity Check"

        context = mock_run.call_args.args[1]
        assert context.borrower_id == 7
        assert context.loan_id == 2
        assert context.requested_amount == Decimal("5000")

    def test_zero_requested_amount_treated_as_absent(self, client):
        with patch(f"{ROUTES}.run_fraud_check", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = make_mock_fraud_check()
            client.post("/api/fraud", json={"borrower_id": 7, "requested_amount": 0})
        assert mock_run.call_args.args[1].requested_amount is None

    def test_evaluation_failure_returns_503(self, client):
        with patch(f"{ROUTES}.run_fraud_check", new_callable=AsyncMock) as mock_run:
            mock_run.side_effect = EvaluationFailed("Rule 'Velocity Check' could not be evaluated")
            resp = client.post("/api/fraud", json={"borrower_id": 7})

        assert resp.status_code == 503
        body = resp.json()
        assert body["title"] == "Service Unavailable"
        assert "Velocity Check" in body["detail"]

    def test_unknown_borrower_returns_404(self, client):
        with patch(f"{ROUTES}.run_fraud_check", new_callable=AsyncMock) as mock_run:
            mock_run.side_effect = IntegrityError("INSERT", {}, Exception("fk"))
            resp = client.post("/api/fraud", json={"borrower_id": 999})
        assert resp.status_code == 404

    def test_missing_borrower_id_is_422(self, client):
        resp = client.post("/api/fraud", json={})
        assert resp.status_code == 422
        assert resp.json()["status"] == 422


class TestListFraudChecks:
    """GET /api/fraud"""

    def test_list_passes_filters(self, client):
        checks = [make_mock_fraud_check(id=2), make_mock_fraud_check(id=1)]
        with patch(f"{ROUTES}.get_fraud_checks", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = checks
            resp = client.get("/api/fraud?suspicious=true&borrower_id=7")

        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert [c["id"] for c in body["data"]] == [2, 1]
        kwargs = mock_get.call_args.kwargs
        assert kwargs == {"borrower_id": 7, "loan_id": None, "is_suspicious": True}

    def test_list_includes_borrower_and_loan_summaries(self, client):
        checks = [
            make_mock_fraud_check(id=2, loan_id=11, borrower=make_mock_borrower(), loan=make_mock_loan()),
            make_mock_fraud_check(id=1),
        ]
        with patch(f"{ROUTES}.get_fraud_checks", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = checks
            resp = client.get("/api/fraud")

        first, second = resp.json()["data"]
        assert first["borrower"] == {
            "id": 7,
            "first_name": "Wanjiru",
            "last_name": "Kamau",
            "phone": "+254711000001",
            "blacklisted": False,
        }
        assert first["loan"]["loan_number"] == "LN-MF3K2Q1A-7XQ2B"
        assert first["loan"]["status"] == "PENDING"
        assert second["borrower"] is None
        assert second["loan"] is None

    def test_list_by_borrower(self, client):
        with patch(f"{ROUTES}.get_fraud_checks", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = []
            resp = client.get("/api/fraud/borrower/7")

        assert resp.status_code == 200
        assert resp.json() == {"data": [], "count": 0}
        assert mock_get.call_args.kwargs == {"borrower_id": 7}


class TestGetFraudCheck:
    """GET /api/fraud/{id}"""

    def test_found(self, client):
        with patch(f"{ROUTES}.get_fraud_check", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = make_mock_fraud_check(
                id=5, borrower=make_mock_borrower(blacklisted=True), loan=make_mock_loan()
            )
            resp = client.get("/api/fraud/5")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["id"] == 5
        assert data["borrower"]["blacklisted"] is True
        assert data["loan"]["id"] == 11

    def test_not_found(self, client):
        with patch(f"{ROUTES}.get_fraud_check", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = None
            resp = client.get("/api/fraud/5")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Fraud check not found"


class TestReviewFraudCheck:
    """PUT /api/fraud/{id}"""

    @pytest.mark.parametrize("decision", ["CLEAR", "CONFIRM"])
    def test_review_records_decision(self, client, reviewer, decision):
        with patch(f"{ROUTES}.review_fraud_check", new_callable=AsyncMock) as mock_review:
            mock_review.return_value = ReviewOutcome(success=True, decision=ReviewDecision(decision))
            resp = client.put("/api/fraud/5", json={"decision": decision})

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "decision": decision}
        _, check_id, user, sent = mock_review.call_args.args
        assert check_id == 5
        assert user == reviewer
        assert sent == ReviewDecision(decision)

    def test_unknown_decision_rejected(self, client):
        resp = client.put("/api/fraud/5", json={"decision": "MAYBE"})
        assert resp.status_code == 422

    def test_not_found(self, client):
        with patch(f"{ROUTES}.review_fraud_check", new_callable=AsyncMock) as mock_review:
            mock_review.side_effect = FraudCheckNotFound("Fraud check 5 not found")
            resp = client.put("/api/fraud/5", json={"decision": "CLEAR"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Fraud check 5 not found"


class TestReviewHistory:
    """GET /api/fraud/{id}/reviews"""

    def test_lists_events(self, client):
        event = MagicMock()
        event.id = 1
        event.timestamp = NOW
        event.event_type = "FRAUD_REVIEW_CONFIRM"
        event.user_id = "officer-1"
        event.user_role = "compliance_officer"
        event.event_data = {"decision": "CONFIRM", "borrower_id": 7}
        with (
            patch(f"{ROUTES}.get_fraud_check", new_callable=AsyncMock) as mock_get,
            patch(f"{ROUTES}.get_review_history", new_callable=AsyncMock) as mock_hist,
        ):
            mock_get.return_value = make_mock_fraud_check(id=5)
            mock_hist.return_value = [event]
            resp = client.get("/api/fraud/5/reviews")

        assert resp.status_code == 200
        body = resp.json()
        assert body["check_id"] == 5
        assert body["count"] == 1
        assert body["events"][0]["event_type"] == "FRAUD_REVIEW_CONFIRM"

    def test_unknown_check(self, client):
        with patch(f"{ROUTES}.get_fraud_check", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = None
            resp = client.get("/api/fraud/5/reviews")
        assert resp.status_code == 404
