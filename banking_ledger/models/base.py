"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db(). Every write goes through atomic().
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from banking_ledger.config import get_settings

settings = get_settings()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_ledger_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine configured for ledger workloads.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.

    On PostgreSQL the pool is bounded and transactions run at the
    configured isolation level; the engine relies on row locks
    (SELECT ... FOR UPDATE) for the sender's account.

    SQLite has no row locks. Instead every transaction starts with
    BEGIN IMMEDIATE, which takes the database write lock up front,
    so two transfers can never read the same pre-debit balance.
    Foreign keys are also switched on, they are off by default.
    """
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # Let SQLAlchemy, not pysqlite, decide when BEGIN is sent
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(connection):
            connection.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("pool_size", settings.DATABASE_POOL_SIZE)
    kwargs.setdefault("isolation_level", settings.DATABASE_ISOLATION_LEVEL)
    return create_engine(url, **kwargs)


# --- Engine ---
engine = create_ledger_engine(settings.DATABASE_URL)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved: all-or-nothing behavior for every ledger write.
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
# expire_on_commit=False keeps committed objects readable without
# opening a new transaction just to refresh them.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


@contextmanager
def atomic(db: Session):
    """
    Run a block as one atomic unit on the given session.

    Commits when the block finishes; on any exception, including
    cancellation of the caller, everything is rolled back and the
    exception propagates. No partial rows are ever left behind.
    """
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
