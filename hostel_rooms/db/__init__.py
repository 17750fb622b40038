"""Database engine, sessions and schema setup."""

from hostel_rooms.db.base import Base
from hostel_rooms.db.init_db import drop_db, init_db
from hostel_rooms.db.session import (
    get_engine,
    make_engine,
    make_session_factory,
)

__all__ = [
    "Base",
    "init_db",
    "drop_db",
    "get_engine",
    "make_engine",
    "make_session_factory",
]
