# ==============================================================================
# SECURITY MODULE - Passwords, JWTs and Role Claims
# ==============================================================================
# Customers and admins share one token format; admin routes read ``role``
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.core.settings import settings
from storefront.core.exceptions import (
    TokenExpiredError,
    InvalidTokenError,
)


# ==============================================================================
# PASSWORD HASHING
# ==============================================================================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt.

    Example:
        >>> verify_password("Sup3rSecret", hash_password("Sup3rSecret"))
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ==============================================================================
# TOKENS
# ==============================================================================

class TokenType:
    ACCESS = "access"
    REFRESH = "refresh"


class Role:
    """Values of the ``role`` claim."""

    CUSTOMER = "customer"
    ADMIN = "admin"


def _encode(subject: Any, token_type: str, lifetime: timedelta, **claims: Any) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
        **claims,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(
    subject: Any,
    role: str = Role.CUSTOMER,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue an access token for a user.

    Args:
        subject: User ID, stored as ``sub``
        role: ``customer`` or ``admin``, stored as ``role``
        expires_delta: Lifetime; defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Example:
        >>> token = create_access_token(subject="user-1", role=Role.ADMIN)
        >>> verify_access_token(token)["role"]
        'admin'
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(subject, TokenType.ACCESS, lifetime, role=role)


def create_refresh_token(subject: Any, expires_delta: Optional[timedelta] = None) -> str:
    """Refresh tokens carry no role; it is re-read from the user on refresh."""
    lifetime = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(subject, TokenType.REFRESH, lifetime)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify signature and expiry.

    Raises:
        TokenExpiredError: ``exp`` has passed
        InvalidTokenError: Bad signature or malformed token
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(message=f"Invalid token: {e}")


def _verify(token: str, expected_type: str) -> Dict[str, Any]:
    payload = decode_token(token)
    if payload.get("type") != expected_type:
        raise InvalidTokenError(message=f"Invalid token type: expected {expected_type} token")
    if not payload.get("sub"):
        raise InvalidTokenError(message="Invalid token payload")
    return payload


def verify_access_token(token: str) -> Dict[str, Any]:
    return _verify(token, TokenType.ACCESS)


def verify_refresh_token(token: str) -> Dict[str, Any]:
    return _verify(token, TokenType.REFRESH)


def create_token_pair(subject: Any, role: str = Role.CUSTOMER) -> Dict[str, str]:
    return {
        "access_token": create_access_token(subject=subject, role=role),
        "refresh_token": create_refresh_token(subject=subject),
        "token_type": "bearer",
    }
