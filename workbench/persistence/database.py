"""Database connection and session management.

This module provides database initialization, engine creation, and session lifecycle
management for the persistence layer.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker

from workbench.config.environment import DEFAULT_DATABASE_URL
from workbench.logging import get_logger

from .exceptions import DatabaseConnectionError

# Module-level engine and session factory
_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str = DEFAULT_DATABASE_URL) -> None:
    """Initialize database connection and create schema if tables don't exist.

    Call once during application startup. It:
    1. Creates the SQLAlchemy engine (SQLite gets foreign keys enabled)
    2. Creates the parent directory of a SQLite database file
    3. Validates the connection
    4. Creates the candidate and job posting tables if missing

    Args:
        database_url: Database connection URL (e.g., "sqlite:///./data/workbench.db")

    Raises:
        DatabaseConnectionError: If database initialization fails

    Example:
        >>> init_database("sqlite:///:memory:")
    """
    global _engine, _session_factory

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e

    logger.info(
        "Initializing database",
        extra={
            "event": "database.initializing",
            "database_url": url.render_as_string(hide_password=True),
        },
    )

    is_sqlite = url.get_backend_name() == "sqlite"

    try:
        if is_sqlite and url.database and url.database != ":memory:":
            db_file = Path(url.database)
            if not db_file.parent.exists():
                logger.info(f"Creating database directory: {db_file.parent}")
                db_file.parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(
            url,
            echo=False,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False, "timeout": 30} if is_sqlite else {},
        )

        if is_sqlite:
            _configure_sqlite(engine)

        _validate_connection(engine)

        from .schema import create_schema

        create_schema(engine)

    except DatabaseConnectionError:
        raise
    except Exception as e:
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True, extra={"event": "database.init_failed"})
        raise DatabaseConnectionError(error_msg) from e

    _engine = engine
    _session_factory = sessionmaker(
        bind=engine,
        autoflush=True,
        expire_on_commit=False,
    )

    logger.info(
        "Database initialized successfully",
        extra={
            "event": "database.initialised",
            "database_url": url.render_as_string(hide_password=True),
        },
    )


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys on every SQLite connection so skill rows cascade."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _validate_connection(engine: Engine) -> None:
    """Validate database connection by executing a test query.

    Raises:
        DatabaseConnectionError: If connection test fails
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.debug("Database connection validated", extra={"event": "database.validated"})
    except Exception as e:
        raise DatabaseConnectionError(f"Failed to validate database connection: {e}") from e


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Provide a database session with automatic transaction management.

    Commits on successful exit, rolls back on exception, and always closes
    the session.

    Yields:
        Session: SQLAlchemy session for database operations

    Raises:
        DatabaseConnectionError: If database not initialized

    Example:
        >>> with get_session() as session:
        ...     repo = CandidateRepository(session)
        ...     candidate = repo.get_by_email("jane@example.com")
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
        logger.debug(
            "Database session committed",
            extra={"event": "database.session.committed"},
        )
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back due to exception: {e}",
            extra={
                "event": "database.session.rolled_back",
                "error_type": type(e).__name__,
            },
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Get the database engine instance.

    Raises:
        DatabaseConnectionError: If database not initialized
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )

    return _engine


def close_database() -> None:
    """Dispose of the engine and forget the session factory.

    Safe to call when the database was never initialized.
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database connections", extra={"event": "database.closing"})
        _engine.dispose()
        _engine = None
        _session_factory = None
