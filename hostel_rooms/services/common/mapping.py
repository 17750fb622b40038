# hostel_rooms/services/common/mapping.py
"""
ORM model to Pydantic schema conversion.

Services return schemas, never live ORM objects, so results stay valid
after the UnitOfWork session is closed.
"""
from __future__ import annotations

from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ServiceError

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema", bound=BaseModel)


class MappingError(ServiceError):
    """Raised when model-to-schema conversion fails."""

    code = "mapping_failed"

    def __init__(self, message: str, source_obj: Any = None) -> None:
        super().__init__(message, details={"source_type": type(source_obj).__name__})
        self.source_obj = source_obj


def to_schema(obj: TModel, schema_cls: Type[TSchema]) -> TSchema:
    """
    Convert an ORM model to a Pydantic schema.

    Raises:
        MappingError: If obj is None or fails validation

    Example:
        >>> room = to_schema(db_room, RoomResponse)
    """
    if obj is None:
        raise MappingError(f"Cannot convert None to {schema_cls.__name__}", source_obj=obj)
    try:
        return schema_cls.model_validate(obj)
    except ValidationError as exc:
        raise MappingError(
            f"Failed to convert {type(obj).__name__} to {schema_cls.__name__}: {exc}",
            source_obj=obj,
        ) from exc


def to_schema_list(objs: Iterable[TModel], schema_cls: Type[TSchema]) -> list[TSchema]:
    return [to_schema(obj, schema_cls) for obj in objs]
