# backend/portfolio_performance/database.py
"""
Database connection and session management.

SQLite (default outside production) shares a single connection through
StaticPool so an in-memory database stays alive for the process.
PostgreSQL uses the default QueuePool with pre-ping.

Tables are created with init_db(); there are no migrations.
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)


def _create_engine() -> Engine:
    """Create the SQLAlchemy engine for settings.database_url."""
    if settings.is_sqlite:
        # check_same_thread=False: FastAPI runs sync endpoints in a thread pool
        logger.info("Configuring SQLite database")
        return create_engine(
            settings.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    logger.info("Configuring PostgreSQL database")
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
