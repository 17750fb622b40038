# hostel_rooms/services/common/__init__.py
"""
Shared service-layer infrastructure.

- **UnitOfWork**: transaction boundary and repository factory
- **security**: bearer token verification
- **permissions**: role checks against the calling ``Principal``
- **mapping**: model-to-schema conversion
- **errors**: service-layer exception hierarchy
- **validation**: identifier checks

Example usage:
    >>> from hostel_rooms.services.common import UnitOfWork, permissions
    >>> with UnitOfWork(session_factory) as uow:
    ...     room = uow.get_repo(RoomRepository).find_by_id(room_id)
"""
from __future__ import annotations

from . import errors, mapping, permissions, security, validation
from .unit_of_work import TransactionError, UnitOfWork

__all__ = [
    "errors",
    "mapping",
    "permissions",
    "security",
    "validation",
    "UnitOfWork",
    "TransactionError",
]
