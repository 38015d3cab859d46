"""
database.py — Database Session & Connection Management

Purpose:
- Create and provide access to the relational store used by the backend.
- Manage SQLAlchemy Engine + Session lifecycle.
- Expose a FastAPI dependency `get_db()` that yields a session per-request.
- Own the declarative `Base` shared by every ORM model so foreign keys resolve.

Key Characteristics:
- Synchronous SQLAlchemy engine.
- No Alembic migrations; `init_db()` creates missing tables at startup.
- Session is opened at the start of a request and closed after the response.

This module does NOT:
- Define ORM models (see findash/models/*).
- Perform any queries or business logic.
"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from findash.core.config import settings
from findash.core.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# -----------------------------------------------------------------------------
# SQLAlchemy Engine
# -----------------------------------------------------------------------------


def build_engine(db_url: str) -> Engine:
    """
    Create an engine for `db_url`.

    Plain postgresql:// URLs are rewritten to use the psycopg (v3) driver.
    SQLite connections are shared with the threadpool FastAPI runs sync
    dependencies in, so same-thread checking is disabled for them.
    """
    if db_url.startswith("postgresql://") and "+" not in db_url.split("://")[0]:
        db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)

    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        db_url,
        pool_pre_ping=True,  # Ensures connections are valid before use
        connect_args=connect_args,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind: Engine = None) -> None:
    """
    Create all tables known to `Base` that do not exist yet.
    """
    # Registers every model on Base.metadata
    import findash.models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database schema ready (%s)", target.url.render_as_string(hide_password=True))

# -----------------------------------------------------------------------------
# FastAPI Dependency
# -----------------------------------------------------------------------------

def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: yields a database session for the duration of the request.

    Usage in API endpoint:
        def endpoint(db: Session = Depends(get_db)):
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_rollback(db: Session) -> None:
    """Commit the session, rolling back before re-raising on failure."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
