"""Database engine lifecycle and session management."""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookshelf.config import get_settings

logger = logging.getLogger("bookshelf")

# Largest value an INTEGER primary key column can hold.
MAX_ID = 2**63 - 1

engine: Engine | None = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _connect_args(url: str, timeout: int) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout}
    if url.startswith(("postgresql", "mysql")):
        return {"connect_timeout": timeout}
    return {}


def init_engine(url: str | None = None) -> Engine:
    """Create the process-wide engine and bind the session factory to it."""
    global engine
    settings = get_settings()
    url = url or settings.DATABASE_URL
    engine = create_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        connect_args=_connect_args(url, settings.DB_CONNECT_TIMEOUT),
    )
    SessionLocal.configure(bind=engine)
    logger.info("Database engine initialised (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def dispose_engine() -> None:
    """Release pooled connections on shutdown."""
    global engine
    if engine is not None:
        engine.dispose()
        logger.info("Database engine disposed")
        engine = None


def get_db() -> Generator[Session, None, None]:
    """Yield a database session."""
    if engine is None:
        init_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
