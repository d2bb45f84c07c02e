"""
conftest.py — Shared Test Fixtures for DFS CRM

Provides an in-memory SQLite database, FastAPI TestClient with auth and
invoicing overrides, and factory fixtures for core models (User, Company,
Employee, Activity).

Business Rules:
- All tests run against isolated in-memory DB (no prod data risk)
- Auth is overridden so tests don't need a session cookie
- The invoicing store is an AsyncMock unless a test swaps it
- Each test function gets a fresh DB (tables created and dropped)

Called by: all test files via pytest autodiscovery
Depends on: dfscrm.models (Base), dfscrm.database (get_db), dfscrm.dependencies
"""

import os
os.environ["TESTING"] = "1"  # Must be set before importing dfscrm modules
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dfscrm.models import Activity, Base, Company, Employee, User

# ── In-memory SQLite engine ──────────────────────────────────────────

TEST_DB_URL = "sqlite://"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """A standard sales user."""
    user = User(
        username="jsmith",
        name="Jane Smith",
        role="user",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """An admin-role user for privileged operations."""
    user = User(
        username="admin",
        name="Test Admin",
        role="admin",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_company(db_session: Session) -> Company:
    """A prospect company with a phone and no invoicing link."""
    co = Company(
        id="co-acme",
        name="Acme Fence Co",
        type="Contractor",
        contact_name="Bob Builder",
        phone="302-555-1212",
        tags={"vinyl", "commercial"},
    )
    db_session.add(co)
    db_session.commit()
    db_session.refresh(co)
    return co


@pytest.fixture()
def test_employee(db_session: Session) -> Employee:
    emp = Employee(id="emp-1", name="Jane Smith", role="Sales", active=True)
    db_session.add(emp)
    db_session.commit()
    db_session.refresh(emp)
    return emp


@pytest.fixture()
def test_activity(db_session: Session, test_company: Company, test_employee: Employee) -> Activity:
    """An answered call logged against test_company."""
    act = Activity(
        id="act-1",
        company_id=test_company.id,
        employee_id=test_employee.id,
        type="call",
        answered=True,
        date=date(2024, 3, 5),
    )
    db_session.add(act)
    db_session.commit()
    db_session.refresh(act)
    return act


@pytest.fixture()
def invoicing():
    """Stand-in for the invoicing store client (all methods async)."""
    client = AsyncMock()
    client.list_customers.return_value = []
    client.get_customer.return_value = None
    client.list_estimates.return_value = []
    client.list_invoices.return_value = []
    return client


@pytest.fixture()
def client(db_session: Session, test_user: User, invoicing) -> TestClient:
    """FastAPI TestClient with auth overridden to return test_user.

    Overrides get_db to use the test session, require_user to skip the
    session cookie, and the invoicing client with the AsyncMock above.
    """
    from dfscrm.connectors.invoicing import get_invoicing_client
    from dfscrm.database import get_db
    from dfscrm.dependencies import require_user
    from dfscrm.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[require_user] = lambda: test_user
    app.dependency_overrides[get_invoicing_client] = lambda: invoicing

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
