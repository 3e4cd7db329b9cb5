# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy engine, session factory, declarative base, the FastAPI
dependency that provides a DB session per request, and the transactional
scope used by every mutating handler.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from core.config import settings
from core.errors import StoreFailureError

# pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
engine = create_engine(settings.database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    FastAPI dependency.  Yields a session for the duration of the request,
    then closes it.  Use with Depends(get_db).
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Commit everything done inside the block, or roll all of it back.

    The folder swap (delete + create) and the cascading cipher delete both
    run inside one of these, so an interrupted sequence never leaves a
    half-applied mapping behind.  A failing COMMIT surfaces as
    StoreFailureError.
    """
    try:
        yield db
    except BaseException:
        db.rollback()
        raise
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailureError("Could not commit transaction") from exc
