"""Security Primitives — password hashing and member access tokens.

Invariants:
    - Passwords are only ever stored as argon2 hashes (salted per hash)
    - Access tokens are HS256 JWTs carrying sub (user id), role, member_id, exp
    - decode_access_token returns None on any invalid/expired token — never raises

Design Decisions:
    - passlib CryptContext: hash scheme can be rotated (deprecated="auto")
      without touching stored credentials
    - Secret and TTL read from Settings at call time: tests override via env
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from netgroup.config import get_settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_temporary_password() -> str:
    """Random credential for admin-created members (reset before first login)."""
    return secrets.token_urlsafe(16)


def create_access_token(
    claims: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    settings = get_settings()
    to_encode = claims.copy()
    current_time = now_utc or datetime.now(timezone.utc)
    expire = current_time + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    to_encode["exp"] = expire
    return jwt.encode(
        to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    settings = get_settings()
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
