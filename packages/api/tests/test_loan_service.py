# This project was developed with assistance from AI tools.
"""Tests for loan origination."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db import Loan, LoanSchedule
from db.enums import LoanStatus
from sqlalchemy.exc import OperationalError

from lending.schemas.loan import LoanCreateRequest
from lending.services.amortization import InvalidLoanParameters
from lending.services.fraud import EvaluationFailed
from lending.services.loan import create_loan, get_loan_schedule

from .factories import make_mock_fraud_check, make_profile, make_store

SERVICE = "lending.services.loan"


def _request(**overrides) -> LoanCreateRequest:
    fields = {
        "borrower_id": 7,
        "principal_amount": Decimal("100000"),
        "interest_rate": Decimal("12"),
        "term_months": 12,
        "start_date": date(2024, 1, 1),
        "purpose": "Stock for shop",
    }
    fields.update(overrides)
    return LoanCreateRequest(**fields)


@pytest.fixture
def loan_session(mock_session):
    """Session whose flush assigns an id to the added Loan."""

    async def _flush():
        for call in mock_session.add.call_args_list:
            obj = call.args[0]
            if isinstance(obj, Loan) and obj.id is None:
                obj.id = 11

    mock_session.flush = AsyncMock(side_effect=_flush)
    return mock_session


@pytest.mark.asyncio
async def test_create_loan_writes_loan_and_schedule(loan_session, reviewer):
    with patch(f"{SERVICE}.run_fraud_check", new_callable=AsyncMock) as mock_run:
        mock_run.return_value = make_mock_fraud_check(loan_id=11)
        result = await create_loan(loan_session, reviewer, _request())

    loan = result.loan
    assert loan.id == 11
    assert loan.borrower_id == 7
    assert loan.status == LoanStatus.PENDING
    assert loan.created_by == "officer-1"
    assert loan.loan_number.startswith("LN-")
    assert loan.start_date == datetime(2024, 1, 1, tzinfo=UTC)
    assert loan.end_date == datetime(2025, 1, 1, tzinfo=UTC)

    rows = loan_session.add_all.call_args.args[0]
    assert len(rows) == 12
    assert all(isinstance(r, LoanSchedule) and r.loan_id == 11 for r in rows)
    assert rows[0].due_date == datetime(2024, 2, 1, tzinfo=UTC)
    assert rows[0].total_due == Decimal("8884.88")

    assert result.calculation.monthly_payment == Decimal("8884.88")
    assert result.fraud_check is mock_run.return_value


@pytest.mark.asyncio
async def test_create_loan_scores_the_new_loan(loan_session, reviewer):
    with patch(f"{SERVICE}.run_fraud_check", new_callable=AsyncMock) as mock_run:
        mock_run.return_value = make_mock_fraud_check()
        await create_loan(loan_session, reviewer, _request())

    context = mock_run.call_args.args[1]
    assert context.borrower_id == 7
    assert context.loan_id == 11
    assert context.requested_amount == Decimal("100000")
    # loan committed before scoring, fraud check committed after
    assert loan_session.commit.await_count == 2


@pytest.mark.asyncio
async def test_fraud_failure_does_not_block_loan(loan_session, reviewer):
    with patch(f"{SERVICE}.run_fraud_check", new_callable=AsyncMock) as mock_run:
        mock_run.side_effect = EvaluationFailed("store down")
        result = await create_loan(loan_session, reviewer, _request())

    assert result.loan.id == 11
    assert result.fraud_check is None
    assert loan_session.commit.await_count == 1


@pytest.mark.asyncio
async def test_fraud_check_write_failure_does_not_block_loan(loan_session, reviewer):
    assign_id = loan_session.flush.side_effect

    async def _flush():
        if loan_session.flush.await_count == 2:
            raise OperationalError("INSERT", {}, Exception("connection lost"))
        await assign_id()

    loan_session.flush = AsyncMock(side_effect=_flush)
    store = make_store(profile=make_profile(id=7))
    with patch("lending.services.fraud.service.SqlRiskDataStore", return_value=store):
        result = await create_loan(loan_session, reviewer, _request())

    assert result.loan.id == 11
    assert result.fraud_check is None
    loan_session.expunge.assert_called_once_with(result.loan)
    loan_session.rollback.assert_awaited_once()
    assert loan_session.commit.await_count == 1


@pytest.mark.asyncio
async def test_fraud_check_commit_failure_does_not_block_loan(loan_session, reviewer):
    loan_session.commit = AsyncMock(
        side_effect=[None, OperationalError("COMMIT", {}, Exception("connection lost"))]
    )
    with patch(f"{SERVICE}.run_fraud_check", new_callable=AsyncMock) as mock_run:
        mock_run.return_value = make_mock_fraud_check()
        result = await create_loan(loan_session, reviewer, _request())

    assert result.loan.id == 11
    assert result.fraud_check is None
    loan_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_invalid_parameters_write_nothing(mock_session, reviewer):
    req = _request().model_copy(update={"term_months": 0})
    with pytest.raises(InvalidLoanParameters):
        await create_loan(mock_session, reviewer, req)
    mock_session.add.assert_not_called()
    mock_session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_loan_schedule_missing_loan(mock_session):
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    mock_session.execute = AsyncMock(return_value=result)

    assert await get_loan_schedule(mock_session, 404) is None
    assert mock_session.execute.await_count == 1


@pytest.mark.asyncio
async def test_get_loan_schedule_returns_rows(mock_session):
    loan_result = MagicMock()
    loan_result.scalar_one_or_none.return_value = 11
    rows_result = MagicMock()
    rows = [MagicMock(), MagicMock()]
    rows_result.scalars.return_value.all.return_value = rows
    mock_session.execute = AsyncMock(side_effect=[loan_result, rows_result])

    assert await get_loan_schedule(mock_session, 11) == rows
