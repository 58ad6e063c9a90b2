"""
Database engine and sessions for DoseMinder

Medicines and dose records live in one relational store. SQLite is the default
for local use and tests; any SQLAlchemy URL works in deployment.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import settings


logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL

    SQLite connections are shared across threads (FastAPI runs sync
    dependencies in a pool) and enforce foreign keys so dose records follow
    their medicine on delete.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_size=10, max_overflow=20, pool_pre_ping=True)

    sqlite_engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=echo
    )

    @event.listens_for(sqlite_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(settings.DATABASE_URL, settings.DATABASE_ECHO)

# Rows stay readable after commit; services hand them to the API layer
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine
)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session for FastAPI dependencies"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session for service calls made without a request session.
    Commits on success and rolls back on any error.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create the medicines and dose_records tables if missing"""
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready at {settings.DATABASE_URL} ({', '.join(sorted(Base.metadata.tables))})")


class DatabaseHealthCheck:
    """Checks reported by the /health endpoint"""

    @staticmethod
    def is_connected() -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(select(1))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    @staticmethod
    def row_counts(db: Session) -> Dict[str, int]:
        """Row count per table, keyed by table name"""
        return {
            name: db.execute(select(func.count()).select_from(table)).scalar_one()
            for name, table in Base.metadata.tables.items()
        }


__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "Base",
    "get_db",
    "get_db_context",
    "init_db",
    "DatabaseHealthCheck"
]
