"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seeded users, script statuses and listing tables
"""

import os

# Keep the application engine off MySQL before anything imports the settings
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledger_api.core.database import Base, get_db
from ledger_api.core.security import get_password_hash
from ledger_api.models.script_status import ScriptStatus
from ledger_api.models.user import User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Listing tables are owned by the scrapers, so tests create them with raw DDL
LISTING_TABLE_DDL = [
    "CREATE TABLE tnledger_courts (id INTEGER PRIMARY KEY, case_name TEXT, date_ran TEXT)",
    "CREATE TABLE tn_public_notice_probate_notice (id INTEGER PRIMARY KEY, decedent TEXT, date_ran TEXT)",
    "CREATE TABLE tn_courts (url TEXT PRIMARY KEY, county TEXT, date_ran TEXT)",
    "CREATE TABLE tn_tax_sales (tdn_no TEXT PRIMARY KEY, address TEXT, date_ran TEXT)",
]
LISTING_TABLES = ["tnledger_courts", "tn_public_notice_probate_notice", "tn_courts", "tn_tax_sales"]


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    with engine.begin() as conn:
        for ddl in LISTING_TABLE_DDL:
            conn.execute(text(ddl))

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        with engine.begin() as conn:
            for table in LISTING_TABLES:
                conn.execute(text(f"DROP TABLE IF EXISTS {table}"))


@pytest.fixture(autouse=True)
def listing_tables_setting(monkeypatch):
    """Expose tn_tax_sales as a listing table keyed by tdn_no."""
    from ledger_api.core.config import settings
    monkeypatch.setattr(settings, "LISTING_TABLES", LISTING_TABLES)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    """Factory that inserts a user with a bcrypt-hashed password."""
    def _create(username="alice", password="pw", tasks=""):
        user = User(username=username, password_hash=get_password_hash(password), tasks=tasks)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def script_statuses(db_session):
    """Seed scripts_status rows for two scrapers."""
    rows = [
        ScriptStatus(script="tn_courts", status="idle"),
        ScriptStatus(script="tnledger_courts", status="idle"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def sample_listings(db_session):
    """Fill every listing table with rows from two scrape dates."""
    statements = [
        "INSERT INTO tnledger_courts (id, case_name, date_ran) VALUES "
        "(1, 'Smith v. Jones', '2024-01-05T00:00:00.000Z'), "
        "(2, 'Doe v. Roe', '2024-01-05T00:00:00.000Z'), "
        "(3, 'Acme v. Beta', '2024-01-06T00:00:00.000Z')",
        "INSERT INTO tn_public_notice_probate_notice (id, decedent, date_ran) VALUES "
        "(1, 'John Smith', '2024-01-05'), "
        "(2, 'Jane Doe', '2024-01-06')",
        "INSERT INTO tn_courts (url, county, date_ran) VALUES "
        "('https://courts.example/a', 'Davidson', '2024-01-05T00:00:00.000Z'), "
        "('https://courts.example/b', 'Knox', '2024-01-06T00:00:00.000Z')",
        "INSERT INTO tn_tax_sales (tdn_no, address, date_ran) VALUES "
        "('TDN-1', '1 Main St', '2024-01-05T00:00:00.000Z'), "
        "('TDN-2', '2 Main St', '2024-01-05T00:00:00.000Z')",
    ]
    for statement in statements:
        db_session.execute(text(statement))
    db_session.commit()


@pytest.fixture
def row_count(db_session):
    """Count the rows currently in a table."""
    def _count(table_name):
        return db_session.execute(text(f"SELECT COUNT(*) FROM {table_name}")).scalar()
    return _count
