# hostel_rooms/services/common/unit_of_work.py
"""
Unit of Work.

One UnitOfWork is one database transaction: repositories obtained from
it share its session, it commits on clean exit and rolls back when the
block raises.
"""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_rooms.repositories.base import BaseRepository

from .errors import ConflictError, ServiceError

logger = logging.getLogger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class TransactionError(ServiceError):
    """Raised when a database transaction fails."""

    code = "transaction_failed"

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message, details={"error_type": type(original_error).__name__})
        self.original_error = original_error


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Transaction boundary for service operations.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     beds = uow.get_repo(BedRepository)
        ...     beds.claim(bed_id, student_id, allocation_id)
        ...     # commits on exit, rolls back if the block raises

    A constraint violation raised by the final commit (for example a
    second active allocation for the same bed) becomes a ConflictError;
    any other database failure becomes a TransactionError.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self.session: Optional[Session] = None
        self._repo_cache: dict[Type[BaseRepository], BaseRepository] = {}

    def __enter__(self) -> "UnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")

        self.session = self._session_factory()
        self._repo_cache.clear()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if self.session is None:
            return False

        try:
            if exc_type is None:
                self._commit()
            else:
                self.session.rollback()
                logger.info("UnitOfWork rolled back due to %s", exc_type.__name__)
        finally:
            self.session.close()
            self.session = None
            self._repo_cache.clear()

        return False

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Commit rejected by a constraint: %s", exc.orig)
            raise ConflictError("Change conflicts with a concurrent update") from exc
        except SQLAlchemyError as exc:
            logger.error("Commit failed: %s", exc)
            self.session.rollback()
            raise TransactionError("Failed to commit transaction", exc) from exc

    def flush(self) -> None:
        """
        Flush pending changes without committing.

        Integrity errors surface here so that callers can translate them
        while the transaction is still open.
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.flush() called outside of context")
        self.session.flush()

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """Repository bound to this unit's session, cached per unit."""
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls not in self._repo_cache:
            self._repo_cache[repo_cls] = repo_cls(self.session)
        return self._repo_cache[repo_cls]  # type: ignore[return-value]
