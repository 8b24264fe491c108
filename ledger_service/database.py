"""
Database connection and session management.
Uses SQLAlchemy for ORM and connection pooling.

A Session is the ledger's unit of atomicity: everything written through
one Session between commits lands together or not at all.
"""

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from ledger_service.core.config import settings


def _serialize_sqlite_writers(engine: Engine) -> None:
    """
    SQLite has no row locks, so SELECT ... FOR UPDATE is a no-op there.
    Start every transaction with BEGIN IMMEDIATE instead: the database
    write lock is taken up front and concurrent transactions queue on the
    driver's busy timeout.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for the given URL.

    PostgreSQL gets a connection pool sized from settings; SQLite gets
    thread sharing, a busy timeout and serialized writers.
    """
    echo = settings.DB_ECHO if echo is None else echo
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        engine = create_engine(
            url,
            echo=echo,
            connect_args={
                "check_same_thread": False,
                # Busy timeout: how long a transaction waits for the write lock
                "timeout": settings.TRANSFER_TIMEOUT_MS / 1000,
            },
        )
        _serialize_sqlite_writers(engine)
        return engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


# Create database engine
engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Yields session and ensures it's closed after use.

    Usage:
        @app.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db here
            pass
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
