# hostel_rooms/services/common/validation.py
"""Argument checks shared by the services."""
from __future__ import annotations

from uuid import UUID

from .errors import ValidationError


def ensure_uuid(value: str, field: str) -> str:
    """
    Return ``value`` in canonical UUID form.

    Raises:
        ValidationError: If value is not a UUID string
    """
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError, AttributeError) as exc:
        raise ValidationError(f"'{value}' is not a valid identifier", field=field) from exc
