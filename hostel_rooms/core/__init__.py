"""HTTP-level plumbing: middleware and exception handlers."""

from hostel_rooms.core.exception_handlers import register_exception_handlers
from hostel_rooms.core.middleware import register_middlewares

__all__ = ["register_exception_handlers", "register_middlewares"]
