# hostel_rooms/services/common/security.py
"""
Bearer token handling.

Tokens are issued by the identity service; this module only verifies
them and turns their claims into a ``Principal``. ``create_access_token``
exists for tooling and tests that need a token signed with the shared key.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from hostel_rooms.config.settings import Settings
from hostel_rooms.schemas.common.enums import UserRole

from .errors import AuthenticationError
from .permissions import Principal


@dataclass(frozen=True)
class JWTSettings:
    """
    JWT configuration.

    Example:
        >>> jwt_settings = JWTSettings.from_settings(get_settings())
    """
    secret_key: str
    algorithm: str = "HS256"
    access_token_expires_minutes: int = 60

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("JWT secret_key cannot be empty")
        if self.access_token_expires_minutes <= 0:
            raise ValueError("access_token_expires_minutes must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTSettings":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            access_token_expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )


class TokenDecodeError(AuthenticationError):
    """Raised when JWT token decoding fails."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class TokenExpiredError(TokenDecodeError):
    def __init__(self) -> None:
        super().__init__("Token has expired")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    *,
    subject: str,
    role: UserRole,
    jwt_settings: JWTSettings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an access token carrying ``sub`` and ``role`` claims."""
    now = _utcnow()
    if expires_delta is None:
        expires_delta = timedelta(minutes=jwt_settings.access_token_expires_minutes)

    payload: dict[str, Any] = {
        "sub": str(subject),
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "type": "access",
    }
    return jwt.encode(payload, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)


def decode_token(token: str, jwt_settings: JWTSettings) -> dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        TokenExpiredError: If token has expired
        TokenDecodeError: If token is invalid or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            jwt_settings.secret_key,
            algorithms=[jwt_settings.algorithm],
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise TokenDecodeError("Invalid or malformed token") from exc

    if payload.get("type", "access") != "access":
        raise TokenDecodeError("Expected access token")
    return payload


def principal_from_token(token: str, jwt_settings: JWTSettings) -> Principal:
    """Build the caller's ``Principal`` from a bearer token."""
    payload = decode_token(token, jwt_settings)

    user_id = payload.get("sub")
    if not user_id:
        raise TokenDecodeError("Token missing user identifier")

    role_str = payload.get("role")
    try:
        role = UserRole(role_str)
    except ValueError as exc:
        raise TokenDecodeError(f"Invalid role in token: {role_str}") from exc

    return Principal(user_id=str(user_id), role=role)
