"""
Database connection and session management
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from bidwell.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()


def _enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """
    Take over transaction handling from pysqlite.

    pysqlite defers BEGIN until the first write, so a read of the current
    high bid followed by an insert is not isolated. BEGIN IMMEDIATE takes
    the write lock up front and serializes writers.
    """

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(settings: Settings) -> Engine:
    """Create the engine for the configured database"""
    if settings.is_sqlite:
        engine = create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=settings.DB_ECHO,
        )
        _enable_sqlite_immediate_transactions(engine)
        return engine

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        echo=settings.DB_ECHO,
    )


engine = build_engine(get_settings())

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db() -> None:
    """Create database tables (development; use migrations in production)"""
    import bidwell.models  # noqa: F401  registers models with Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def drop_db() -> None:
    """Drop all database tables. Tests only."""
    import bidwell.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session (dependency)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
