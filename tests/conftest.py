"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import os

# Must be set before banking_ledger is imported: the application
# engine is created from DATABASE_URL at import time.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from banking_ledger.config import get_settings
from banking_ledger.main import app
from banking_ledger.models import Base
from banking_ledger.models.base import create_ledger_engine, get_db
from banking_ledger.services.account_directory import AccountDirectory
from banking_ledger.services.ledger_engine import LedgerEngine
from banking_ledger.services.user_service import UserService


# Use SQLite for tests, no external database needed. A file
# database (not :memory:) so that several connections, one per
# thread in the concurrency tests, see the same data.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_ledger_engine(TEST_DATABASE_URL)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

ROOT = get_settings().ROOT_ACCOUNT_NUMBER


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Sessions for tests that need more than one connection."""
    return TestSessionLocal


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_account(db_session):
    """Factory: create a user with one active account."""
    users = UserService(db_session)
    directory = AccountDirectory(db_session)

    def _open(email: str):
        user = users.create_user(email)
        return directory.create_account(user.id)

    return _open


@pytest.fixture
def deposit(db_session):
    """Factory: deposit from the root account into an account number."""
    ledger = LedgerEngine(db_session)

    def _deposit(account_number: str, amount: int, reference: str | None = None):
        reference = reference or f"dep-{account_number}-{amount}"
        return ledger.create_transaction(reference, ROOT, account_number, amount)

    return _deposit
