"""
Conexión a base de datos

SQLAlchemy engine, session factory and the FastAPI dependency that hands
one session to each request. PostgreSQL (psycopg2) in production; SQLite
URLs are accepted for local runs and tests.

Author: Bazar
Updated: 2026-10-19
"""
import logging
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration
# ============================================================================

def build_engine(database_url: str) -> Engine:
    """
    Create the engine for a database URL

    SQLite gets a single shared connection (in-memory databases vanish
    otherwise); every other backend gets a sized, pre-pinged pool.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verificar conexión antes de usar
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


engine = build_engine(settings.DATABASE_URL)

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para modelos
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency para obtener sesión de SQLAlchemy

    Usage:
        @app.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None) -> None:
    """Create every table registered on Base"""
    # Models must be imported so their tables are registered on Base
    from bazar import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def check_connection(db: Session) -> bool:
    """Run a trivial query; False when the database is unreachable"""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database connectivity check failed: {e}")
        return False
