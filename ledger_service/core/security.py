"""
Password hashing and access tokens.
"""

import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ledger_service.core.config import settings

HASH_SCHEME = "pbkdf2_sha256"


def get_password_hash(password: str, iterations: Optional[int] = None) -> str:
    """Hash a password with PBKDF2-HMAC-SHA256 and a per-user random salt."""
    iterations = iterations or settings.PASSWORD_HASH_ITERATIONS
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    encoded = base64.b64encode(digest).decode("ascii")
    return f"{HASH_SCHEME}${iterations}${salt}${encoded}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash."""
    try:
        scheme, iterations, salt, encoded = hashed_password.split("$", 3)
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if scheme != HASH_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt.encode("ascii"), iterations)
    return hmac.compare_digest(base64.b64encode(digest).decode("ascii"), encoded)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """
    Return the user id carried by a token, or None if the token is
    invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
