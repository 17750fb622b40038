# hostel_rooms/services/common/errors.py
"""
Service-layer exceptions.

Raised by service methods and translated into HTTP responses by the
handlers in ``hostel_rooms.core.exception_handlers``.
"""
from __future__ import annotations

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    code = "service_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    code = "not_found"

    def __init__(
        self,
        resource_type: str,
        identifier: str | int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class AlreadyExistsError(ServiceError):
    """Raised when creating a resource whose unique key is taken."""

    code = "already_exists"

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: Any,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with {field}='{value}' already exists"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class ValidationError(ServiceError):
    """Raised for malformed or inconsistent arguments."""

    code = "invalid_argument"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class AuthenticationError(ServiceError):
    """Raised when the caller cannot be identified."""

    code = "unauthenticated"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"

    def __init__(
        self,
        message: str = "Authorization failed",
        required_permission: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.required_permission = required_permission


class ConflictError(ServiceError):
    """Raised when an operation conflicts with current state."""

    code = "conflict"

    def __init__(
        self,
        message: str,
        conflicting_field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.conflicting_field = conflicting_field


class BedOccupiedError(ConflictError):
    """The bed is already held by an active allocation."""

    code = "bed_occupied"

    def __init__(self, bed_id: str) -> None:
        super().__init__(
            f"Bed '{bed_id}' is already occupied",
            conflicting_field="bed_id",
            details={"bed_id": bed_id},
        )
        self.bed_id = bed_id


class AllocationAlreadyEndedError(ConflictError):
    code = "allocation_already_ended"

    def __init__(self, allocation_id: str) -> None:
        super().__init__(
            f"Allocation '{allocation_id}' has already ended",
            conflicting_field="status",
            details={"allocation_id": allocation_id},
        )
        self.allocation_id = allocation_id


class BusinessRuleViolation(ServiceError):
    """Raised when a business rule is violated."""

    code = "business_rule_violation"

    def __init__(
        self,
        rule_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.rule_name = rule_name
