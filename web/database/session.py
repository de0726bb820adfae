"""
Database session management for the BOATMRP web adapter.

Provides the SQLAlchemy session factory and dependency injection
helpers for FastAPI.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from web.config import get_settings
from web.database.models import Base

# Built lazily from the current settings; see reset_engine()
_engine = None
_SessionLocal = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """Return the shared engine, creating it from the configured URL."""
    global _engine
    if _engine is None:
        config = get_settings()
        url = make_url(config.database_url)
        is_sqlite = url.get_backend_name() == "sqlite"

        # Ensure the directory exists for file-based SQLite
        if is_sqlite and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        _engine = create_engine(
            url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            echo=config.debug,
        )
        if is_sqlite:
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def reset_engine() -> None:
    """Dispose of the engine so the next use re-reads the settings."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def init_db() -> None:
    """Create the purchase order tables if they don't exist yet."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that provides a database session.

    Usage in routes:
        @router.get("/purchase-orders")
        def list_orders(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Context manager for database sessions outside of FastAPI.

    Commits on success and rolls back on any error.

    Usage:
        with get_db_context() as db:
            orders = db.query(PurchaseOrder).all()
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
