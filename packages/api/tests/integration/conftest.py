# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL, no mocks.

A session-scoped container runs the Alembic migrations once.  The risk data
store opens its own sessions, so tests commit their seed data and every
table is truncated afterwards instead of relying on savepoint rollback.
"""

import os
from datetime import UTC, datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from db import Borrower, Loan
from db.enums import LoanStatus
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

pytestmark = pytest.mark.integration

_DB_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


@pytest.fixture(scope="session")
def pg_container():
    with PostgresContainer(image="postgres:16", username="test", password="test", dbname="test") as pg:
        yield pg


@pytest.fixture(scope="session")
def db_url(pg_container):
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def sync_db_url(pg_container):
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def _run_migrations(sync_db_url):
    from alembic import command
    from alembic.config import Config

    os.environ["DATABASE_URL"] = sync_db_url
    alembic_cfg = Config(os.path.join(_DB_DIR, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_DIR, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_db_url)
    command.upgrade(alembic_cfg, "head")


@pytest_asyncio.fixture
async def session_factory(db_url, _run_migrations):
    """Session factory on the test database; truncates every table afterwards."""
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    async with engine.begin() as conn:
        await conn.execute(
            text(
                "TRUNCATE audit_events, fraud_checks, loan_schedules, loans, borrowers "
                "RESTART IDENTITY CASCADE"
            )
        )
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def make_borrower(**overrides) -> Borrower:
    fields = {
        "first_name": "Wanjiru",
        "last_name": "Kamau",
        "phone": "+254711000001",
        "monthly_income": Decimal("2000"),
    }
    fields.update(overrides)
    return Borrower(**fields)


def make_loan(borrower: Borrower, number: str, status=LoanStatus.ACTIVE, **overrides) -> Loan:
    fields = {
        "loan_number": number,
        "borrower": borrower,
        "principal_amount": Decimal("1000"),
        "interest_rate": Decimal("12"),
        "term_months": 6,
        "start_date": datetime(2024, 1, 1, tzinfo=UTC),
        "end_date": datetime(2024, 7, 1, tzinfo=UTC),
        "status": status,
    }
    fields.update(overrides)
    return Loan(**fields)
