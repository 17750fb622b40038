"""
Base repository with the CRUD operations shared by all domain repositories.

Repositories never commit: the caller's UnitOfWork owns the transaction.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_rooms.config.logging import get_logger
from hostel_rooms.models.base import BaseModel, SoftDeleteModel, utcnow

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository bound to one model and one session.
    """

    def __init__(self, model: Type[ModelType], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session owned by the caller
        """
        self.model = model
        self.session = session
        self._is_soft_delete = issubclass(model, SoftDeleteModel)

    # ==================== Create Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """Add an entity and flush so defaults and ids are populated."""
        self.session.add(entity)
        self.session.flush()
        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    def add_all(self, entities: List[ModelType]) -> List[ModelType]:
        self.session.add_all(entities)
        self.session.flush()
        return entities

    # ==================== Read Operations ====================

    def find_by_id(self, id: str, include_deleted: bool = False) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID
            include_deleted: Include soft-deleted entities

        Returns:
            Entity or None
        """
        stmt = select(self.model).where(self.model.id == id)
        if self._is_soft_delete and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[List[str]] = None,
        include_deleted: bool = False,
    ) -> List[ModelType]:
        """
        Find entities matching criteria.

        Args:
            criteria: Column equality filters; list values become IN filters
            order_by: Column names, prefix with ``-`` for descending
            include_deleted: Include soft-deleted entities
        """
        stmt = select(self.model)
        for key, value in criteria.items():
            column = getattr(self.model, key)
            if isinstance(value, (list, tuple)):
                stmt = stmt.where(column.in_(value))
            else:
                stmt = stmt.where(column == value)

        if self._is_soft_delete and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))

        for field in order_by or []:
            if field.startswith("-"):
                stmt = stmt.order_by(getattr(self.model, field[1:]).desc())
            else:
                stmt = stmt.order_by(getattr(self.model, field).asc())

        return list(self.session.execute(stmt).scalars())

    # ==================== Update / Delete Operations ====================

    def update_fields(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """Apply attribute changes and flush."""
        for key, value in data.items():
            setattr(entity, key, value)
        self.session.flush()
        return entity

    def soft_delete(self, entity: ModelType, deleted_by: Optional[str] = None) -> ModelType:
        if not self._is_soft_delete:
            raise TypeError(f"{self.model.__name__} does not support soft delete")
        entity.is_deleted = True
        entity.deleted_at = utcnow()
        entity.deleted_by = deleted_by
        self.session.flush()
        logger.info(f"Soft deleted {self.model.__name__} with id: {entity.id}")
        return entity

    def delete(self, entity: ModelType) -> None:
        self.session.delete(entity)
        self.session.flush()
