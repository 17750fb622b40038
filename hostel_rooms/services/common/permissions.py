# hostel_rooms/services/common/permissions.py
"""
Authorization helpers.

Role checks run inside the service operations so that every entry point
(HTTP, scripts, tests) is subject to the same rules.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterable, Optional

from hostel_rooms.schemas.common.enums import UserRole

from .errors import AuthorizationError


class PermissionDenied(AuthorizationError):
    """Raised when a user lacks required permissions."""

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        role: Optional[UserRole] = None,
        required_permission: Optional[str] = None,
    ) -> None:
        super().__init__(message, required_permission=required_permission)
        self.user_id = user_id
        self.role = role


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller as seen by the service layer.

    Attributes:
        user_id: Identifier issued by the identity service
        role: Caller's role
        metadata: Optional extra claims carried by the token
    """
    user_id: str
    role: UserRole
    metadata: dict = field(default_factory=dict)

    @property
    def is_staff(self) -> bool:
        return self.role == UserRole.STAFF

    def has_any_role(self, roles: Iterable[UserRole]) -> bool:
        return self.role in set(roles)


def require_role(
    principal: Principal,
    allowed_roles: Iterable[UserRole],
    *,
    error_message: Optional[str] = None,
) -> None:
    """
    Assert that principal has one of the allowed roles.

    Raises:
        PermissionDenied: If principal lacks required role

    Example:
        >>> require_role(actor, [UserRole.STAFF])
    """
    allowed_roles = list(allowed_roles)
    if not principal.has_any_role(allowed_roles):
        roles_str = ", ".join(r.value for r in allowed_roles)
        msg = error_message or (
            f"User {principal.user_id} with role '{principal.role.value}' "
            f"does not have one of required roles: {roles_str}"
        )
        raise PermissionDenied(msg, user_id=principal.user_id, role=principal.role)


def require_staff(principal: Principal) -> None:
    require_role(principal, [UserRole.STAFF])


def require_staff_or_owner(
    principal: Principal,
    resource_owner_id: str,
    *,
    resource_type: str = "resource",
) -> None:
    """
    Allow staff, or the user the resource belongs to.

    Raises:
        PermissionDenied: If principal is neither staff nor the owner
    """
    if principal.is_staff or _same_user(principal.user_id, resource_owner_id):
        return
    raise PermissionDenied(
        f"User {principal.user_id} may not access {resource_type} "
        f"of {resource_owner_id}",
        user_id=principal.user_id,
        role=principal.role,
    )


def _same_user(user_id: str, owner_id: str) -> bool:
    # UUIDs compare by value, so case and hyphenation do not matter
    try:
        return uuid.UUID(str(user_id)) == uuid.UUID(str(owner_id))
    except ValueError:
        return user_id == owner_id
