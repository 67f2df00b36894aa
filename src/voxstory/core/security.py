"""Security utilities for password hashing and session tokens."""
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from .config import Settings, get_settings

SESSION_TOKEN_TYPE = "session"


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash
        rounds: bcrypt cost factor; defaults to the configured value

    Returns:
        Hashed password string
    """
    if rounds is None:
        rounds = get_settings().password_hash_rounds
    # Bcrypt requires bytes and has 72-byte limit
    password_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches, False otherwise
    """
    try:
        password_bytes = plain_password.encode("utf-8")[:72]
        hashed_bytes = hashed_password.encode("utf-8")
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except (ValueError, TypeError):
        return False


def create_session_token(
    user_id: str,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token for a user.

    The token only carries an ``exp`` claim when an explicit ``expires_delta``
    is given or ``session_expire_minutes`` is configured.

    Args:
        user_id: The user the session belongs to
        settings: Settings holding the signing key; defaults to the cached ones
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT string
    """
    settings = settings or get_settings()
    now = datetime.now(UTC)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "type": SESSION_TOKEN_TYPE,
    }

    if expires_delta is None and settings.session_expire_minutes is not None:
        expires_delta = timedelta(minutes=settings.session_expire_minutes)
    if expires_delta is not None:
        to_encode["exp"] = now + expires_delta

    encoded: str = jwt.encode(
        to_encode,
        settings.effective_jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    return encoded


def decode_session_token(
    token: str | None,
    settings: Settings | None = None,
) -> str | None:
    """Validate a session token and return the user id it was issued for.

    Args:
        token: The JWT string, possibly missing

    Returns:
        User id, or None if the token is missing, malformed, expired,
        of the wrong type or carries a bad signature
    """
    if not token or not isinstance(token, str):
        return None

    settings = settings or get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.effective_jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id
