"""Database engine and session management."""
import logging
import time
from functools import lru_cache
from typing import Callable, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from hostel_rooms.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SLOW_QUERY_SECONDS = 0.5


def _install_sqlite_listeners(engine: Engine) -> None:
    """
    Make pysqlite emit BEGIN IMMEDIATE for every transaction.

    The write lock is taken when the transaction starts, so two requests
    allocating the same bed queue up behind each other instead of failing
    on a SHARED -> RESERVED lock upgrade.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy, not pysqlite, decide when transactions begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _install_timing_listeners(engine: Engine) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Log query execution time - start timer"""
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Log query execution time - stop timer and log if slow query"""
        total_time = time.time() - conn.info['query_start_time'].pop()
        if total_time > SLOW_QUERY_SECONDS:
            logger.warning(
                f"Slow query detected ({total_time:.4f}s): {statement[:100]}..."
            )


def make_engine(url: Optional[str] = None, settings: Optional[Settings] = None) -> Engine:
    """
    Create an engine for the given URL (defaults to the configured database).

    SQLite URLs get a busy timeout, cross-thread connections and
    immediate transactions; other backends get a pooled engine.
    """
    settings = settings or default_settings
    url = url or settings.get_database_url()

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=settings.DB_ECHO,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.SQLITE_BUSY_TIMEOUT,
            },
        )
        _install_sqlite_listeners(engine)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,  # Check connection before using it
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,   # Recycle connections after 1 hour
            echo=settings.DB_ECHO,
        )

    _install_timing_listeners(engine)
    return engine


def make_session_factory(engine: Engine) -> Callable[[], Session]:
    return sessionmaker(
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured database, created on first use."""
    return make_engine()

