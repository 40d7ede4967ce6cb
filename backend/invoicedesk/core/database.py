"""Database access: the process-wide connection pool and the query executor.

``get_database()`` builds the :class:`Database` lazily on first use and returns
the same instance afterwards. Repositories and services receive the instance
explicitly and run every statement through :meth:`Database.query` or
:meth:`Database.execute`, so values are always bound as parameters.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.sql.base import Executable

from invoicedesk.core.config import settings

logger = logging.getLogger(__name__)

Base: Any = declarative_base()

Statement = str | Executable
Params = Mapping[str, Any] | None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(dsn: str) -> Engine:
    """Create an engine for ``dsn``.

    SQLite engines get foreign key enforcement turned on for every connection.
    Other backends use a sized QueuePool with pre-ping so a dropped connection
    is replaced on the next checkout instead of failing every later call.
    """
    if dsn.startswith("sqlite"):
        engine = create_engine(dsn, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        dsn,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def _as_executable(statement: Statement) -> Executable:
    if isinstance(statement, str):
        return text(statement)
    return statement


class Database:
    """Connection pool plus session factory for one database."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def query(self, statement: Statement, params: Params = None) -> list[RowMapping]:
        """Execute a read statement and return its rows as mappings.

        Raw SQL strings use named bind parameters (``:name``).
        """
        with self.session() as db:
            if params:
                result = db.execute(_as_executable(statement), dict(params))
            else:
                result = db.execute(_as_executable(statement))
            return list(result.mappings().all())

    def execute(self, statement: Statement, params: Params = None) -> int:
        """Execute one mutating statement in its own transaction.

        Commits on success, rolls back and re-raises on failure. Returns the
        number of affected rows.
        """
        with self.session() as db:
            try:
                if params:
                    result = db.execute(_as_executable(statement), dict(params))
                else:
                    result = db.execute(_as_executable(statement))
                rowcount = result.rowcount  # type: ignore[attr-defined]
                db.commit()
            except Exception:
                db.rollback()
                raise
            return int(rowcount)

    def create_all(self) -> None:
        """Create every mapped table that does not exist yet."""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


_database: Database | None = None


def get_database() -> Database:
    """Return the process-wide Database, creating it on first call.

    Raises ConfigurationError when the connection settings are incomplete.
    """
    global _database

    if _database is not None:
        return _database

    _database = Database(create_db_engine(settings.database_dsn))
    logger.info("Database engine created (dialect=%s)", _database.dialect)
    return _database


def reset_database() -> None:
    """Dispose the pool and forget the cached Database."""
    global _database
    if _database is not None:
        _database.dispose()
    _database = None
