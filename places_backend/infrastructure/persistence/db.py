"""Database setup helpers (SQLAlchemy engine/session)."""
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from places_backend.core.settings import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Built on first use so a missing driver or bad URL only disables the durable tier.
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Get or create the shared engine."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings.get_database_url(), future=True, pool_pre_ping=True)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the shared session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine(), future=True)
    return _session_factory


def init_db(engine: Optional[Engine] = None) -> None:
    """Create tables that do not exist yet."""
    # Import models so they register on Base.metadata
    from places_backend.infrastructure.persistence import models  # noqa: F401

    target = engine or get_engine()
    Base.metadata.create_all(bind=target)
    logger.info("Place details table ready")


def dispose_engine() -> None:
    """Dispose the shared engine. Call this when shutting down."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine disposed")
