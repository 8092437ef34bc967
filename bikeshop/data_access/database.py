import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from bikeshop.core.config import settings


logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """
    Turns on foreign key enforcement for every new SQLite connection.

    SQLite ignores FOREIGN KEY clauses unless the pragma is set per
    connection. With it on, deleting a record that sales still reference
    fails with an IntegrityError instead of orphaning those sales.

    Args:
        engine (Engine): A SQLite engine; must be called before its first connection.
    """
    @event.listens_for(engine, "connect")
    def _set_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if is_sqlite else {}
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
if is_sqlite:
    enable_sqlite_foreign_keys(engine)


def create_db_and_tables() -> None:
    """Creates the customer, product, salesperson and sale tables if they don't exist."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created successfully.")


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency to provide a database session."""
    with Session(engine) as session:
        yield session
