"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides the
small helpers used by the application, the admin reset and the tests.
"""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def make_engine(url: str) -> Engine:
    """Build an engine for `url`; SQLite connections may cross threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Engine = None):
    """Create the `responses` table if it does not exist.

    Safe to call repeatedly; it is used at startup and again after a full
    reset to re-provision the schema.
    """
    # register table metadata before create_all
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def compact(bind: Engine = None):
    """Reclaim free pages after a bulk delete.

    VACUUM cannot run inside a transaction, so the statement is issued on
    an autocommit connection.
    """
    bind = bind or engine
    if bind.dialect.name not in ("sqlite", "postgresql"):
        return
    with bind.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
        conn.exec_driver_sql("VACUUM")


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
