"""Pytest configuration and shared fixtures for Expense Analyzer tests.

Every test gets its own in-memory SQLite database. Repository tests work on a
plain session; route tests go through a FastAPI ``TestClient`` whose ``get_db``
dependency is pointed at the same database.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expense_analyzer.db.core import (
    AccountDB,
    Base,
    CategoryDB,
    ExpenseDB,
    IncomeDB,
    TransferDB,
    get_db,
)
from expense_analyzer.main import app


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """In-memory SQLite engine; StaticPool keeps one connection so all sessions see the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient with ``get_db`` overridden to use the test database."""

    def override_get_db():
        database = session_factory()
        try:
            yield database
        finally:
            database.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Test Data
# =============================================================================


@pytest.fixture
def seeded(db_session) -> SimpleNamespace:
    """Accounts "Checking" and "Savings" plus category "Groceries", committed.

    Returns the ids rather than the instances, which expire on commit.
    """
    checking = AccountDB(id=uuid4(), name="Checking")
    savings = AccountDB(id=uuid4(), name="Savings")
    groceries = CategoryDB(id=uuid4(), name="Groceries")
    db_session.add_all([checking, savings, groceries])
    db_session.commit()
    return SimpleNamespace(checking=checking.id, savings=savings.id, groceries=groceries.id)


def make_income(account_id: UUID, category_id: UUID, amount: str, timestamp: datetime,
                comment: Optional[str] = None) -> IncomeDB:
    return IncomeDB(
        id=uuid4(),
        account_id=account_id,
        category_id=category_id,
        amount=Decimal(amount),
        timestamp=timestamp,
        comment=comment,
    )


def make_expense(account_id: UUID, category_id: UUID, amount: str, timestamp: datetime,
                 comment: Optional[str] = None) -> ExpenseDB:
    return ExpenseDB(
        id=uuid4(),
        account_id=account_id,
        category_id=category_id,
        amount=Decimal(amount),
        timestamp=timestamp,
        comment=comment,
    )


def make_transfer(outgoing_id: UUID, incoming_id: UUID, amount: str, timestamp: datetime) -> TransferDB:
    return TransferDB(
        id=uuid4(),
        outgoing_account_id=outgoing_id,
        incoming_account_id=incoming_id,
        amount=Decimal(amount),
        timestamp=timestamp,
    )
