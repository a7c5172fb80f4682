"""Database configuration, session management and transaction scoping.

SQLite is the default store. When the configured URL points at SQLite the
engine is tuned for a web application:

    - **WAL (Write-Ahead Logging)**: readers are not blocked while the award
      protocol writes, so statistics pages stay responsive during check-in.

    - **Foreign Keys**: disabled by default in SQLite. Enabled so that a
      badge cannot reference a missing participant and an attendance row
      cannot reference a missing registration.

    - **check_same_thread=False**: FastAPI may hand a session created in one
      thread to a handler running in another.

Any other SQLAlchemy URL (e.g. PostgreSQL) is used as-is.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from upevents.core.config import settings

is_sqlite = settings.database_url.startswith("sqlite")
connect_args = {"check_same_thread": False} if is_sqlite else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if is_sqlite:
    sa_event.listen(engine, "connect", set_sqlite_pragma)


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session


@contextmanager
def scoped_transaction(session: Session) -> Iterator[Session]:
    """Run a unit of work that either commits entirely or not at all.

    Commits when the block exits normally. On any exception the session is
    rolled back and the exception re-raised, so no partial writes survive.
    The session itself is owned (and closed) by whoever created it.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
