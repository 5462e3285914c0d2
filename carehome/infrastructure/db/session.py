from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from carehome.config import settings


def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
    finally:
        cursor.close()


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> Engine:
    url = database_url or settings.database_url
    engine = create_engine(url, echo=settings.echo_sql, future=True)
    if url.startswith("sqlite"):
        # archive rows cascade from discharged_patients
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


@lru_cache(maxsize=None)
def _sessionmaker(database_url: str | None = None) -> sessionmaker[Session]:
    return sessionmaker(
        bind=get_engine(database_url), autoflush=False, autocommit=False, expire_on_commit=False, future=True
    )


@contextmanager
def session_scope() -> Iterator[Session]:
    """One transaction against the configured archive/audit database.

    The engine is created on first use, so building services never touches the database.
    """
    session: Session = _sessionmaker()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
