# hostel_rooms/db/init_db.py
"""Database initialization utilities."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from hostel_rooms.db.base import Base, import_models
from hostel_rooms.db.session import get_engine

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development/testing only.
    For production, manage the schema with migrations.
    """
    engine = engine or get_engine()
    import_models()
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


def drop_db(engine: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Use with caution.
    """
    engine = engine or get_engine()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
