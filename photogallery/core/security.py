"""Password handling and signed session cookies."""

import hmac
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from photogallery.schemas.auth import Identity, Role

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12
SESSION_ALGORITHM = "HS256"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage."""
    # bcrypt has a 72-byte limit.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, stored: str, hashed: bool) -> bool:
    """
    Check a password against the stored value.

    With hashed=False the stored value is plain text and is compared in
    constant time; otherwise it is a bcrypt hash.
    """
    if not hashed:
        return hmac.compare_digest(plain_password.encode("utf-8"), stored.encode("utf-8"))
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, stored.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_session_cookie(session_id: str, secret: str, expire_minutes: int) -> str:
    """Sign an opaque session id into a JWT with iat and exp."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sid": session_id,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret, algorithm=SESSION_ALGORITHM)


def decode_session_cookie(value: str, secret: str) -> str | None:
    """Return the session id from a signed cookie, or None if invalid or expired."""
    try:
        payload = jwt.decode(value, secret, algorithms=[SESSION_ALGORITHM])
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid


def is_admin(identity: Identity | None) -> bool:
    """True only for an identity whose role is admin. No identity is non-admin."""
    if identity is None:
        return False
    if identity.role is Role.ADMIN:
        return True
    if identity.role is Role.USER:
        return False
    raise ValueError(f"Unhandled role: {identity.role!r}")
